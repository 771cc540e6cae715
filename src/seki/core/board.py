"""Board - immutable stone placement on a rectangular grid."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from seki.core.enums import EMPTY, Stone
from seki.core.errors import KoViolation, OccupiedPoint, OutOfBoundsPoint, Suicide
from seki.core.move import Move
from seki.core.types import Point

_LAYOUT_CHARS = {"B": int(Stone.BLACK), "W": int(Stone.WHITE), "+": EMPTY, ".": EMPTY}


@dataclass(frozen=True, slots=True)
class Captures:
    """Prisoners taken by each color."""

    black: int = 0
    white: int = 0

    def get(self, stone: Stone) -> int:
        return self.black if stone is Stone.BLACK else self.white

    def added(self, stone: Stone, count: int) -> Captures:
        if stone is Stone.BLACK:
            return Captures(self.black + count, self.white)
        return Captures(self.black, self.white + count)


@dataclass(frozen=True, slots=True)
class Ko:
    """*stone* may not play at *point* on the very next ply."""

    point: Point
    stone: Stone


class Board:
    """Immutable Go board.

    Every action returns a new :class:`Board`; a rejected action raises
    before anything is built, so the receiver is never touched.
    """

    __slots__ = ("_cols", "_rows", "_cells", "_captures", "_ko")

    def __init__(
        self,
        cols: int,
        rows: int,
        cells: Sequence[int] | None = None,
        captures: Captures | None = None,
        ko: Ko | None = None,
    ) -> None:
        if cols <= 0 or rows <= 0:
            raise ValueError(f"Invalid board dimensions: {cols}x{rows}")
        if cells is None:
            cells = (EMPTY,) * (cols * rows)
        if len(cells) != cols * rows:
            raise ValueError(
                f"Board needs {cols * rows} cells for {cols}x{rows}, got {len(cells)}"
            )
        self._cols = cols
        self._rows = rows
        # Any signed value is normalised so equal positions compare equal.
        self._cells: tuple[int, ...] = tuple((c > 0) - (c < 0) for c in cells)
        self._captures = captures or Captures()
        self._ko = ko

    # ── Factories ────────────────────────────────────────────────────────

    @classmethod
    def empty(cls, cols: int, rows: int) -> Board:
        return cls(cols, rows)

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[int]]) -> Board:
        """Build from a ``rows x cols`` matrix of signed stone values."""
        rows = len(matrix)
        cols = len(matrix[0]) if rows else 0
        if any(len(row) != cols for row in matrix):
            raise ValueError("Malformed board matrix")
        return cls(cols, rows, [value for row in matrix for value in row])

    @classmethod
    def from_layout(cls, layout: Sequence[str]) -> Board:
        """Build from text rows: ``B`` black, ``W`` white, ``+``/``.`` empty."""
        try:
            matrix = [[_LAYOUT_CHARS[ch] for ch in row] for row in layout]
        except KeyError as exc:
            raise ValueError(f"Invalid layout character: {exc.args[0]!r}") from None
        return cls.from_matrix(matrix)

    @classmethod
    def with_moves(
        cls,
        cols: int,
        rows: int,
        moves: Iterable[Move],
        setup: Iterable[Point] = (),
    ) -> Board:
        """Replay *moves* on an empty board (after placing *setup* black stones)."""
        return cls(cols, rows).place_setup_stones(setup, Stone.BLACK).replay(moves)

    def place_setup_stones(self, points: Iterable[Point], stone: Stone) -> Board:
        """Pre-place stones without capture resolution (handicap setup)."""
        cells = list(self._cells)
        for point in points:
            self._check_on_board(point)
            cells[self._idx(point)] = int(stone)
        return Board(self._cols, self._rows, cells, self._captures, self._ko)

    # ── Accessors ────────────────────────────────────────────────────────

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cells(self) -> tuple[int, ...]:
        """Flat row-major signed stone values."""
        return self._cells

    @property
    def matrix(self) -> list[list[int]]:
        """``rows x cols`` copy of the board."""
        c = self._cols
        return [list(self._cells[r * c : (r + 1) * c]) for r in range(self._rows)]

    @property
    def captures(self) -> Captures:
        return self._captures

    @property
    def ko(self) -> Ko | None:
        return self._ko

    def on_board(self, point: Point) -> bool:
        col, row = point
        return 0 <= col < self._cols and 0 <= row < self._rows

    def stone_at(self, point: Point) -> Stone | None:
        if not self.on_board(point):
            return None
        return Stone.from_int(self._cells[self._idx(point)])

    def is_empty(self) -> bool:
        return not any(self._cells)

    def points(self) -> Iterable[Point]:
        """All points in row-major order."""
        for row in range(self._rows):
            for col in range(self._cols):
                yield col, row

    # ── Actions ──────────────────────────────────────────────────────────

    def play(self, point: Point, stone: Stone) -> Board:
        """Place *stone* at *point*, resolving captures and ko.

        Raises:
            OutOfBoundsPoint, OccupiedPoint, KoViolation, Suicide
        """
        cells, captured, liberties = self._place_stone(point, stone)
        captures = self._captures.added(stone, len(captured))

        ko: Ko | None = None
        if (
            len(captured) == 1
            and len(liberties) == 1
            and liberties[0] == captured[0]
            and all(cells[self._idx(n)] != stone for n in self.neighbors(point))
        ):
            ko = Ko(captured[0], stone.opposite)

        return Board(self._cols, self._rows, cells, captures, ko)

    def pass_(self) -> Board:
        """A pass leaves the stones alone but lifts any ko restriction."""
        if self._ko is None:
            return self
        return Board(self._cols, self._rows, self._cells, self._captures, None)

    def apply(self, move: Move) -> Board:
        if move.is_play:
            assert move.point is not None
            return self.play(move.point, move.stone)
        if move.is_pass:
            return self.pass_()
        return self

    def replay(self, moves: Iterable[Move]) -> Board:
        """Apply *moves* in order, raising on the first illegal one."""
        board = self
        for move in moves:
            board = board.apply(move)
        return board

    def is_legal(self, point: Point, stone: Stone) -> bool:
        """Whether :meth:`play` would succeed. Never mutates."""
        try:
            self._place_stone(point, stone)
        except (OutOfBoundsPoint, OccupiedPoint, KoViolation, Suicide):
            return False
        return True

    # ── Graph algorithms ─────────────────────────────────────────────────

    def neighbors(self, point: Point) -> list[Point]:
        """Orthogonal neighbors that are on the board."""
        col, row = point
        result: list[Point] = []
        if col > 0:
            result.append((col - 1, row))
        if col + 1 < self._cols:
            result.append((col + 1, row))
        if row > 0:
            result.append((col, row - 1))
        if row + 1 < self._rows:
            result.append((col, row + 1))
        return result

    def chain(self, point: Point) -> list[Point]:
        """Connected same-color stones containing *point* (empty → ``[]``)."""
        if self.stone_at(point) is None:
            return []
        return self._chain_in(self._cells, point)

    def liberties(self, point: Point) -> list[Point]:
        """Liberties of the chain containing *point*."""
        return self._liberties_in(self._cells, self.chain(point))

    def chain_liberties(self, chain: Iterable[Point]) -> list[Point]:
        return self._liberties_in(self._cells, chain)

    # ── Internal ─────────────────────────────────────────────────────────

    def _idx(self, point: Point) -> int:
        return point[1] * self._cols + point[0]

    def _check_on_board(self, point: Point) -> None:
        if not self.on_board(point):
            raise OutOfBoundsPoint(point)

    def _place_stone(
        self, point: Point, stone: Stone
    ) -> tuple[list[int], list[Point], list[Point]]:
        """Validate and resolve a play on a scratch copy of the cells.

        Returns the new cells, the captured points and the liberties of
        the placed chain.
        """
        self._check_on_board(point)
        if self._cells[self._idx(point)] != EMPTY:
            raise OccupiedPoint(point)
        if self._ko is not None and self._ko.point == point and self._ko.stone == stone:
            raise KoViolation(point)

        cells = list(self._cells)
        cells[self._idx(point)] = int(stone)

        # Every adjacent enemy chain is judged before any is removed.
        opponent = int(stone.opposite)
        seen: set[Point] = set()
        captured: list[Point] = []
        for n in self.neighbors(point):
            if n in seen or cells[self._idx(n)] != opponent:
                continue
            enemy = self._chain_in(cells, n)
            seen.update(enemy)
            if not self._liberties_in(cells, enemy):
                captured.extend(enemy)

        for p in captured:
            cells[self._idx(p)] = EMPTY

        liberties = self._liberties_in(cells, self._chain_in(cells, point))
        if not liberties:
            raise Suicide(point)

        return cells, captured, liberties

    def _chain_in(self, cells: Sequence[int], point: Point) -> list[Point]:
        color = cells[self._idx(point)]
        visited = {point}
        result: list[Point] = []
        stack = [point]
        while stack:
            p = stack.pop()
            result.append(p)
            for n in self.neighbors(p):
                if n not in visited and cells[self._idx(n)] == color:
                    visited.add(n)
                    stack.append(n)
        return result

    def _liberties_in(self, cells: Sequence[int], chain: Iterable[Point]) -> list[Point]:
        seen: set[Point] = set()
        libs: list[Point] = []
        for p in chain:
            for n in self.neighbors(p):
                if n not in seen and cells[self._idx(n)] == EMPTY:
                    seen.add(n)
                    libs.append(n)
        return libs

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._cols == other._cols
            and self._rows == other._rows
            and self._cells == other._cells
            and self._captures == other._captures
            and self._ko == other._ko
        )

    def __hash__(self) -> int:
        return hash((self._cols, self._rows, self._cells, self._captures, self._ko))

    def __repr__(self) -> str:
        chars = {int(Stone.BLACK): "B", int(Stone.WHITE): "W", EMPTY: "+"}
        return "\n".join("".join(chars[v] for v in row) for row in self.matrix)
