"""Exception hierarchy for the rules engine.

Two families, both recoverable and both raised before any state is
committed:

* :class:`InputError`: an action the caller may not take right now
  (wrong turn, occupied point, ko, suicide ...).
* :class:`StructuralError`: undecodable input (SGF text, snapshots,
  unknown tree node ids).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from seki.core.enums import Stone
    from seki.core.types import Point


class GoError(Exception):
    """Base class for every error raised by the engine."""


# ── Input errors ─────────────────────────────────────────────────────────────


class InputError(GoError, ValueError):
    """A rejected action; the engine state is unchanged."""


class OutOfTurn(InputError):
    def __init__(self, stone: Stone, expected: Stone) -> None:
        super().__init__(f"{stone} cannot act, it is {expected}'s turn")
        self.stone = stone
        self.expected = expected


class OutOfBoundsPoint(InputError):
    def __init__(self, point: Point) -> None:
        super().__init__(f"Point {point} is not on the board")
        self.point = point


class OccupiedPoint(InputError):
    def __init__(self, point: Point) -> None:
        super().__init__(f"Point {point} is already occupied")
        self.point = point


class KoViolation(InputError):
    def __init__(self, point: Point) -> None:
        super().__init__(f"Immediate recapture at {point} violates ko")
        self.point = point


class Suicide(InputError):
    def __init__(self, point: Point) -> None:
        super().__init__(f"Playing at {point} would be suicide")
        self.point = point


class InvalidMoveKind(InputError):
    """A move whose kind and point disagree (e.g. a pass with a point)."""


class GameOver(InputError):
    """Mutation attempted after the game (or a review) has finished."""


# ── Structural errors ────────────────────────────────────────────────────────


class StructuralError(GoError, ValueError):
    """Malformed external data; the previous in-memory state stays valid."""


class SgfError(StructuralError):
    """SGF text could not be parsed or converted."""

    def __init__(self, message: str, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)
        self.position = position


class SnapshotError(StructuralError):
    """A persisted engine or tree payload is corrupt."""


class UnknownNode(StructuralError):
    def __init__(self, node_id: int) -> None:
        super().__init__(f"Unknown game tree node: {node_id}")
        self.node_id = node_id
