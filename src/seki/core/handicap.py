"""Hoshi-based handicap stone placement."""

from __future__ import annotations

from seki.core.types import Point

_MIN_SIZE = 7
_LARGE_BOARD = 13


def max_handicap(cols: int, rows: int) -> int:
    """Maximum number of handicap stones for a board (``0`` = unsupported).

    Only odd square boards of at least 7x7 have a handicap layout; boards
    below 13x13 get corners + center only.
    """
    if cols != rows or cols < _MIN_SIZE or cols % 2 == 0:
        return 0
    return 9 if cols >= _LARGE_BOARD else 5


def handicap_points(cols: int, rows: int, count: int) -> list[Point] | None:
    """Fixed placement for *count* stones, or ``None`` if not applicable."""
    if count < 2 or count > max_handicap(cols, rows):
        return None

    off = 3 if cols >= _LARGE_BOARD else 2
    far = cols - 1 - off
    mid = cols // 2

    tl, tr = (off, off), (far, off)
    bl, br = (off, far), (far, far)
    cc = (mid, mid)
    ml, mr = (off, mid), (far, mid)
    tc, bc = (mid, off), (mid, far)

    layouts: dict[int, list[Point]] = {
        2: [tr, bl],
        3: [tr, bl, br],
        4: [tl, tr, bl, br],
        5: [tl, tr, bl, br, cc],
        6: [tl, tr, ml, mr, bl, br],
        7: [tl, tr, ml, mr, bl, br, cc],
        8: [tl, tr, ml, mr, bl, br, tc, bc],
        9: [tl, tr, ml, mr, bl, br, tc, bc, cc],
    }
    return layouts[count]
