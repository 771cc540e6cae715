"""Game-layer enums and configuration objects."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from seki.core.enums import Stone
from seki.core.territory import DEFAULT_PLAYOUTS, DEFAULT_SEED

# ── Game stage FSM states ────────────────────────────────────────────────────


class Stage(StrEnum):
    """Engine stage. Always derived from moves and result, never stored."""

    UNSTARTED = "unstarted"
    BLACK_TO_PLAY = "black_to_play"
    WHITE_TO_PLAY = "white_to_play"
    TERRITORY_REVIEW = "territory_review"
    DONE = "done"

    @property
    def is_play(self) -> bool:
        return self in (Stage.BLACK_TO_PLAY, Stage.WHITE_TO_PLAY)

    @classmethod
    def to_play(cls, stone: Stone) -> Stage:
        return cls.BLACK_TO_PLAY if stone is Stone.BLACK else cls.WHITE_TO_PLAY


# ── Rule configuration ───────────────────────────────────────────────────────


def _parse_stone(value: Any) -> Stone:
    if isinstance(value, Stone):
        return value
    if isinstance(value, str):
        return Stone.from_letter(value[:1])
    if isinstance(value, int) and not isinstance(value, bool):
        stone = Stone.from_int(value)
        if stone is not None:
            return stone
    raise ValueError(f"Invalid stone: {value!r}")


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Per-game rule parameters.

    Args:
        komi: Points added to White's score.
        handicap: Number of pre-placed black stones (``0`` or ``2..9``).
        handicap_first: Color to move first once handicap stones are placed.
    """

    komi: float = 6.5
    handicap: int = 0
    handicap_first: Stone = Stone.WHITE

    def __post_init__(self) -> None:
        if self.handicap < 0 or self.handicap == 1 or self.handicap > 9:
            raise ValueError(f"Invalid handicap: {self.handicap}")

    @property
    def has_handicap(self) -> bool:
        return self.handicap >= 2

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RuleSet:
        """Build from loosely-typed settings (e.g. a JSON game record)."""
        try:
            komi = float(data.get("komi", 6.5))
            handicap = int(data.get("handicap", 0))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid rule settings: {dict(data)!r}") from None
        first = _parse_stone(data.get("handicap_first", Stone.WHITE))
        return cls(komi=komi, handicap=handicap, handicap_first=first)

    def to_dict(self) -> dict[str, Any]:
        return {
            "komi": self.komi,
            "handicap": self.handicap,
            "handicap_first": self.handicap_first.letter,
        }


@dataclass(frozen=True, slots=True)
class DeadStoneSettings:
    """Monte Carlo parameters for dead-stone suggestions."""

    playouts: int = DEFAULT_PLAYOUTS
    seed: int = DEFAULT_SEED
