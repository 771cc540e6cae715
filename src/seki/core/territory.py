"""Territory estimation, dead-stone detection and scoring.

Everything here is a pure function of its inputs.  Dead-stone detection
uses a seeded PRNG so that two independent runs (server and client) make
the same suggestion for the same board.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from seki.core.board import Board
from seki.core.enums import EMPTY, Stone
from seki.core.types import Point, point_from_index

DEFAULT_PLAYOUTS = 100
DEFAULT_SEED = 0x5E41DEAD

_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF


# ── Ownership ────────────────────────────────────────────────────────────────


def estimate_territory(board: Board, dead_stones: Iterable[Point] = ()) -> tuple[int, ...]:
    """Flat row-major ownership map: ``1`` Black, ``-1`` White, ``0`` neutral.

    Dead stones are treated as empty.  Live stones own nothing; each maximal
    empty region belongs to the single color bordering it, or to nobody
    (dame) when both or neither color touch it.
    """
    cols = board.cols
    virtual = list(board.cells)
    for col, row in dead_stones:
        if board.on_board((col, row)):
            virtual[row * cols + col] = EMPTY
    return _ownership(virtual, board)


def _ownership(virtual: list[int], board: Board) -> tuple[int, ...]:
    cols = board.cols
    size = len(virtual)
    ownership = [0] * size
    visited = [False] * size

    for start in range(size):
        if visited[start] or virtual[start] != EMPTY:
            continue

        region: list[int] = []
        borders = set()
        stack = [start]
        visited[start] = True
        while stack:
            i = stack.pop()
            region.append(i)
            for n in board.neighbors(point_from_index(i, cols)):
                ni = n[1] * cols + n[0]
                if virtual[ni] != EMPTY:
                    borders.add(virtual[ni])
                elif not visited[ni]:
                    visited[ni] = True
                    stack.append(ni)

        owner = borders.pop() if len(borders) == 1 else 0
        for i in region:
            ownership[i] = owner

    return tuple(ownership)


# ── Benson's unconditional life ──────────────────────────────────────────────


def find_unconditionally_alive(board: Board, stone: Stone) -> set[Point]:
    """Stones of *stone* that are alive whatever the opponent plays.

    Benson's algorithm: repeatedly discard chains with fewer than two vital
    regions (enclosed empty regions whose every point is a liberty of the
    chain) until the candidate set is stable.
    """
    chains: list[list[Point]] = []
    chain_of: dict[Point, int] = {}
    for point in board.points():
        if point in chain_of or board.stone_at(point) is not stone:
            continue
        chain = board.chain(point)
        for p in chain:
            chain_of[p] = len(chains)
        chains.append(chain)

    if not chains:
        return set()

    chain_sets = [set(chain) for chain in chains]
    alive = [True] * len(chains)

    while True:
        vital_counts = [0] * len(chains)
        for region, bordering in _enclosed_regions(board, stone, chain_of, alive):
            for ci in bordering:
                if all(
                    any(n in chain_sets[ci] for n in board.neighbors(rp)) for rp in region
                ):
                    vital_counts[ci] += 1

        changed = False
        for ci, is_alive in enumerate(alive):
            if is_alive and vital_counts[ci] < 2:
                alive[ci] = False
                changed = True
        if not changed:
            break

    return {p for ci, chain in enumerate(chains) if alive[ci] for p in chain}


def _enclosed_regions(
    board: Board,
    stone: Stone,
    chain_of: dict[Point, int],
    alive: list[bool],
) -> list[tuple[list[Point], set[int]]]:
    """Empty regions bordered only by still-alive chains of *stone*."""
    visited: set[Point] = set()
    regions: list[tuple[list[Point], set[int]]] = []

    for start in board.points():
        if start in visited or board.stone_at(start) is not None:
            continue

        region: list[Point] = []
        bordering: set[int] = set()
        enclosed = True
        stack = [start]
        visited.add(start)
        while stack:
            p = stack.pop()
            region.append(p)
            for n in board.neighbors(p):
                occupant = board.stone_at(n)
                if occupant is None:
                    if n not in visited:
                        visited.add(n)
                        stack.append(n)
                elif occupant is stone and alive[chain_of[n]]:
                    bordering.add(chain_of[n])
                else:
                    enclosed = False

        if enclosed:
            regions.append((region, bordering))

    return regions


# ── Monte Carlo ownership ────────────────────────────────────────────────────


class _XorShift128:
    """Deterministic xorshift128 generator (32-bit words)."""

    __slots__ = ("_s",)

    def __init__(self, seed: int) -> None:
        mixed = (seed * 6364136223846793005) & _U64
        words = [
            seed & _U32,
            (seed >> 32) & _U32,
            mixed & _U32,
            (mixed >> 32) & _U32,
        ]
        self._s = [w or 0xDEADBEEF for w in words]

    def next(self) -> int:
        s = self._s
        t = s[3]
        x = s[0]
        s[3] = s[2]
        s[2] = s[1]
        s[1] = x
        x ^= (x << 11) & _U32
        x ^= x >> 8
        s[0] = x ^ t ^ (t >> 19)
        return s[0]

    def range(self, n: int) -> int:
        return self.next() % n


class _PlayoutBoard:
    """Mutable scratch board for random playouts."""

    __slots__ = ("data", "_neighbors")

    def __init__(self, board: Board) -> None:
        self.data = list(board.cells)
        cols = board.cols
        self._neighbors = [
            [n[1] * cols + n[0] for n in board.neighbors(point_from_index(i, cols))]
            for i in range(len(self.data))
        ]

    def neighbors(self, v: int) -> list[int]:
        return self._neighbors[v]

    def has_liberties(self, v: int) -> bool:
        sign = self.data[v]
        visited = {v}
        stack = [v]
        while stack:
            u = stack.pop()
            for n in self._neighbors[u]:
                value = self.data[n]
                if value == EMPTY:
                    return True
                if value == sign and n not in visited:
                    visited.add(n)
                    stack.append(n)
        return False

    def chain(self, v: int) -> list[int]:
        sign = self.data[v]
        visited = {v}
        result: list[int] = []
        stack = [v]
        while stack:
            u = stack.pop()
            result.append(u)
            for n in self._neighbors[u]:
                if self.data[n] == sign and n not in visited:
                    visited.add(n)
                    stack.append(n)
        return result

    def try_move(self, sign: int, v: int) -> bool:
        """Play a pseudo-legal move; eye fills, suicide and ko shapes are refused."""
        data = self.data
        nbrs = self._neighbors[v]
        if all(data[n] == sign for n in nbrs):
            return False

        data[v] = sign
        captured: list[int] = []
        for n in nbrs:
            if data[n] == -sign and not self.has_liberties(n):
                for c in self.chain(n):
                    data[c] = EMPTY
                    captured.append(c)

        if not captured and not self.has_liberties(v):
            data[v] = EMPTY
            return False

        if len(captured) == 1:
            lone = all(data[n] != sign for n in nbrs)
            libs = sum(1 for n in nbrs if data[n] == EMPTY)
            if lone and libs == 1:
                data[v] = EMPTY
                data[captured[0]] = -sign
                return False

        return True


def _play_till_end(board: Board, starting_sign: int, rng: _XorShift128) -> list[int]:
    playout = _PlayoutBoard(board)
    data = playout.data
    empty = [i for i, value in enumerate(data) if value == EMPTY]

    sign = starting_sign
    passes = 0
    while passes < 2 and empty:
        played = False
        attempts = len(empty)
        while attempts > 0 and empty:
            idx = rng.range(len(empty))
            v = empty[idx]
            if data[v] != EMPTY:
                empty[idx] = empty[-1]
                empty.pop()
                attempts -= 1
                continue
            if playout.try_move(sign, v):
                empty[idx] = empty[-1]
                empty.pop()
                played = True
                break
            attempts -= 1

        passes = 0 if played else passes + 1
        sign = -sign

    # Remaining empty points take the color of their first stone neighbor.
    for i, value in enumerate(data):
        if value == EMPTY:
            for n in playout.neighbors(i):
                if data[n] != EMPTY:
                    data[i] = data[n]
                    break

    return data


def probability_map(
    board: Board, playouts: int = DEFAULT_PLAYOUTS, seed: int = DEFAULT_SEED
) -> list[float]:
    """Per-point ownership in ``[-1.0, 1.0]`` (positive favors Black)."""
    size = board.cols * board.rows
    if playouts <= 0:
        return [0.0] * size

    rng = _XorShift128(seed)
    black_wins = [0] * size
    for i in range(playouts):
        starting_sign = 1 if i % 2 == 0 else -1
        for v, value in enumerate(_play_till_end(board, starting_sign, rng)):
            black_wins[v] += (value > 0) - (value < 0)
    return [count / playouts for count in black_wins]


# ── Dead stones ──────────────────────────────────────────────────────────────


def detect_dead_stones(
    board: Board,
    *,
    playouts: int = DEFAULT_PLAYOUTS,
    seed: int = DEFAULT_SEED,
) -> frozenset[Point]:
    """Suggest a starting dead-stone set for territory review.

    Unconditionally alive stones are never dead.  Other stones sitting in
    territory the opponent owns once only alive stones remain are dead;
    the rest are judged by how firmly random playouts give their
    liberties to the opponent.  Always subject to human override.
    """
    alive = find_unconditionally_alive(board, Stone.BLACK)
    alive |= find_unconditionally_alive(board, Stone.WHITE)

    cols = board.cols
    simplified = Board(cols, board.rows).place_setup_stones(
        (p for p in alive if board.stone_at(p) is Stone.BLACK), Stone.BLACK
    )
    simplified = simplified.place_setup_stones(
        (p for p in alive if board.stone_at(p) is Stone.WHITE), Stone.WHITE
    )
    ownership = estimate_territory(simplified)

    dead: set[Point] = set()
    for point in board.points():
        stone = board.stone_at(point)
        if stone is None or point in alive:
            continue
        if ownership[point[1] * cols + point[0]] == int(stone.opposite):
            dead.add(point)

    prob = probability_map(board, playouts, seed)
    visited: set[Point] = set()
    for point in board.points():
        stone = board.stone_at(point)
        if stone is None or point in visited:
            continue
        chain = board.chain(point)
        visited.update(chain)
        if any(p in alive or p in dead for p in chain):
            continue

        liberties = board.chain_liberties(chain)
        if not liberties:
            dead.update(chain)
            continue
        average = sum(prob[l[1] * cols + l[0]] for l in liberties) / len(liberties)
        if int(stone) * average < 0:
            dead.update(chain)

    return frozenset(dead)


def toggle_dead_chain(
    board: Board, dead_stones: Iterable[Point], point: Point
) -> frozenset[Point]:
    """Flip the dead/alive mark of the whole chain at *point*.

    If any stone of the chain is marked dead the chain is revived, otherwise
    it is marked dead.  Empty points leave the set unchanged.
    """
    dead = set(dead_stones)
    chain = board.chain(point)
    if not chain:
        return frozenset(dead)
    if any(p in dead for p in chain):
        dead.difference_update(chain)
    else:
        dead.update(chain)
    return frozenset(dead)


# ── Scoring ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PlayerPoints:
    """Territory (owned points) and captures (prisoners + dead enemy stones)."""

    territory: int
    captures: int

    @property
    def total(self) -> int:
        return self.territory + self.captures


@dataclass(frozen=True, slots=True)
class GameScore:
    black: PlayerPoints
    white: PlayerPoints
    komi: float

    @property
    def black_total(self) -> float:
        return float(self.black.total)

    @property
    def white_total(self) -> float:
        return self.white.total + self.komi

    @property
    def result(self) -> str:
        return format_result(self.black_total, self.white_total)

    def display_total(self, stone: Stone) -> str:
        """Total as shown to players, e.g. ``'40'`` or ``'39+6.5'``."""
        if stone is Stone.BLACK:
            return str(self.black.total)
        if not self.komi:
            return str(self.white.total)
        return f"{self.white.total}+{_format_number(self.komi)}"

    def to_dict(self) -> dict[str, object]:
        return {
            "black": {"territory": self.black.territory, "captures": self.black.captures},
            "white": {"territory": self.white.territory, "captures": self.white.captures},
            "komi": self.komi,
            "result": self.result,
        }


def score(
    board: Board,
    dead_stones: Iterable[Point],
    komi: float,
    ownership: tuple[int, ...] | None = None,
) -> GameScore:
    """Territory + captures scoring; komi goes to White.

    Points of dead stones count as territory for the owner of the region
    they sit in, and each dead stone is an extra prisoner for its captor.
    """
    dead = frozenset(dead_stones)
    if ownership is None:
        ownership = estimate_territory(board, dead)

    black_territory = sum(1 for o in ownership if o > 0)
    white_territory = sum(1 for o in ownership if o < 0)
    dead_black = sum(1 for p in dead if board.stone_at(p) is Stone.BLACK)
    dead_white = sum(1 for p in dead if board.stone_at(p) is Stone.WHITE)

    return GameScore(
        black=PlayerPoints(black_territory, board.captures.black + dead_white),
        white=PlayerPoints(white_territory, board.captures.white + dead_black),
        komi=komi,
    )


def format_result(black_score: float, white_score: float) -> str:
    """``'B+N'``, ``'W+N'`` or ``'Draw'`` (integral margins have no ``.0``)."""
    diff = black_score - white_score
    if diff == 0:
        return "Draw"
    winner = "B" if diff > 0 else "W"
    return f"{winner}+{_format_number(abs(diff))}"


def _format_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)
