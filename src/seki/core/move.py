"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from seki.core.enums import MoveKind, Stone
from seki.core.errors import InvalidMoveKind
from seki.core.types import Point


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable record of a single turn: play, pass or resign.

    A play always carries a point; a pass or resignation never does.
    """

    kind: MoveKind
    stone: Stone
    point: Point | None = None

    def __post_init__(self) -> None:
        if self.kind == MoveKind.PLAY and self.point is None:
            raise InvalidMoveKind("A play move requires a point")
        if self.kind != MoveKind.PLAY and self.point is not None:
            raise InvalidMoveKind(f"A {self.kind} move must not carry a point")

    # ── Factories ────────────────────────────────────────────────────────

    @classmethod
    def play(cls, stone: Stone, point: Point) -> Move:
        return cls(MoveKind.PLAY, stone, (int(point[0]), int(point[1])))

    @classmethod
    def pass_(cls, stone: Stone) -> Move:
        return cls(MoveKind.PASS, stone)

    @classmethod
    def resign(cls, stone: Stone) -> Move:
        return cls(MoveKind.RESIGN, stone)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def is_play(self) -> bool:
        return self.kind == MoveKind.PLAY

    @property
    def is_pass(self) -> bool:
        return self.kind == MoveKind.PASS

    @property
    def is_resign(self) -> bool:
        return self.kind == MoveKind.RESIGN

    # ── Plain-data conversion ────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "stone": int(self.stone),
            "point": list(self.point) if self.point is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Move:
        point = data.get("point")
        return cls(
            MoveKind(data["kind"]),
            Stone(data["stone"]),
            (int(point[0]), int(point[1])) if point is not None else None,
        )

    def __str__(self) -> str:
        if self.point is None:
            return f"{self.stone.letter} {self.kind}"
        return f"{self.stone.letter}{self.point}"
