"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass, field

from seki.core.tree import GameTree, NodeId


@dataclass(slots=True)
class SgfNode:
    """One ``;`` node: property identifiers mapped to their raw values.

    Insertion order is kept so unknown properties survive a round trip.
    """

    properties: dict[str, list[str]] = field(default_factory=dict)

    def get(self, ident: str) -> str | None:
        """First value of *ident*, or ``None`` if absent."""
        values = self.properties.get(ident)
        return values[0] if values else None

    def add(self, ident: str, value: str) -> None:
        self.properties.setdefault(ident, []).append(value)


@dataclass(slots=True)
class SgfGameTree:
    """``( Sequence GameTree* )``."""

    nodes: list[SgfNode] = field(default_factory=list)
    variations: list[SgfGameTree] = field(default_factory=list)


@dataclass(slots=True)
class SgfMetadata:
    """Game-info properties of the root node."""

    cols: int = 19
    rows: int = 19
    komi: float | None = None
    handicap: int | None = None
    black_name: str | None = None
    white_name: str | None = None
    game_name: str | None = None
    result: str | None = None
    time_limit_secs: float | None = None
    overtime: str | None = None


@dataclass(slots=True)
class MoveTime:
    """Remaining clock (``BL``/``WL``) and overtime stones (``OB``/``OW``)."""

    black_time: float | None = None
    white_time: float | None = None
    black_periods: int | None = None
    white_periods: int | None = None

    def is_empty(self) -> bool:
        return (
            self.black_time is None
            and self.white_time is None
            and self.black_periods is None
            and self.white_periods is None
        )


@dataclass(slots=True)
class SgfConversion:
    """Result of importing one SGF game tree."""

    tree: GameTree
    metadata: SgfMetadata
    move_times: dict[NodeId, MoveTime] = field(default_factory=dict)
