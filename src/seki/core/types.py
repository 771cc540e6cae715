"""Point type alias and coordinate helpers.

Points are zero-indexed ``(col, row)`` pairs with ``(0, 0)`` at the top-left
corner.  Boards are stored row-major, so the flat index of a point is
``row * cols + col``.
"""

from __future__ import annotations

from typing import TypeAlias

Point: TypeAlias = tuple[int, int]

_SGF_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_GTP_LETTERS = "ABCDEFGHJKLMNOPQRSTUVWXYZ"  # no "I"


def point_index(point: Point, cols: int) -> int:
    """Flat row-major index of *point*."""
    col, row = point
    return row * cols + col


def point_from_index(index: int, cols: int) -> Point:
    """Inverse of :func:`point_index`."""
    return index % cols, index // cols


def sgf_coord(point: Point) -> str:
    """SGF coordinate pair, e.g. ``(2, 3)`` → ``'cd'``."""
    col, row = point
    return _SGF_LETTERS[col] + _SGF_LETTERS[row]


def parse_sgf_coord(text: str) -> Point:
    """Parse an SGF coordinate pair, e.g. ``'cd'`` → ``(2, 3)``."""
    if len(text) != 2 or text[0] not in _SGF_LETTERS or text[1] not in _SGF_LETTERS:
        raise ValueError(f"Invalid SGF coordinate: {text!r}")
    return _SGF_LETTERS.index(text[0]), _SGF_LETTERS.index(text[1])


def point_name(point: Point, rows: int) -> str:
    """Human-readable board coordinate, e.g. ``(3, 15)`` on 19x19 → ``'D4'``."""
    col, row = point
    if not (0 <= col < len(_GTP_LETTERS)):
        raise ValueError(f"Column out of range for display: {col}")
    return f"{_GTP_LETTERS[col]}{rows - row}"
