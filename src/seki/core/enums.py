"""Core enumerations for the Go domain."""

from __future__ import annotations

from enum import IntEnum, StrEnum

EMPTY = 0


class Stone(IntEnum):
    """Stone color. Values are signs so that ``-stone`` flips the color."""

    BLACK = 1
    WHITE = -1

    @property
    def opposite(self) -> Stone:
        return Stone(-self.value)

    @property
    def letter(self) -> str:
        """Single-letter code used by SGF and result strings."""
        return "B" if self is Stone.BLACK else "W"

    @classmethod
    def from_int(cls, value: int) -> Stone | None:
        """Normalise any signed integer to a stone (``0`` → ``None``)."""
        if value > 0:
            return cls.BLACK
        if value < 0:
            return cls.WHITE
        return None

    @classmethod
    def from_letter(cls, letter: str) -> Stone:
        if letter.upper() == "B":
            return cls.BLACK
        if letter.upper() == "W":
            return cls.WHITE
        raise ValueError(f"Invalid stone letter: {letter!r}")

    def __neg__(self) -> Stone:
        return self.opposite

    def __str__(self) -> str:
        return self.name.capitalize()


class MoveKind(StrEnum):
    """Kind of a recorded turn."""

    PLAY = "play"
    PASS = "pass"
    RESIGN = "resign"
