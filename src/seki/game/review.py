"""TerritoryReview - dead-stone negotiation after two consecutive passes."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from seki.core.board import Board
from seki.core.enums import Stone
from seki.core.errors import GameOver
from seki.core.territory import (
    DEFAULT_PLAYOUTS,
    DEFAULT_SEED,
    GameScore,
    detect_dead_stones,
    estimate_territory,
    score,
    toggle_dead_chain,
)
from seki.core.types import Point

_LOGGER = logging.getLogger(__name__)


class TerritoryReview:
    """Both players mark dead chains, then approve the same set to settle.

    Any change to the dead set withdraws both approvals, so a settled
    score is always one that both colors have seen.
    """

    __slots__ = ("_board", "_komi", "_dead", "_ownership", "_score", "_approved", "_settled")

    def __init__(self, board: Board, komi: float, dead_stones: Iterable[Point] = ()) -> None:
        self._board = board
        self._komi = komi
        self._dead: frozenset[Point] = frozenset()
        self._ownership: tuple[int, ...] = ()
        self._score: GameScore | None = None
        self._approved: set[Stone] = set()
        self._settled = False
        self._set_dead(frozenset(dead_stones))

    @classmethod
    def start(
        cls,
        board: Board,
        komi: float,
        *,
        dead: Iterable[Point] | None = None,
        playouts: int = DEFAULT_PLAYOUTS,
        seed: int = DEFAULT_SEED,
    ) -> TerritoryReview:
        """Open a review seeded with *dead*, or with a heuristic suggestion."""
        if dead is None:
            dead = detect_dead_stones(board, playouts=playouts, seed=seed)
        return cls(board, komi, dead)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        return self._board

    @property
    def komi(self) -> float:
        return self._komi

    @property
    def dead_stones(self) -> frozenset[Point]:
        return self._dead

    @property
    def ownership(self) -> tuple[int, ...]:
        return self._ownership

    @property
    def score(self) -> GameScore:
        assert self._score is not None
        return self._score

    @property
    def approvals(self) -> frozenset[Stone]:
        return frozenset(self._approved)

    @property
    def is_settled(self) -> bool:
        return self._settled

    @property
    def result(self) -> str | None:
        return self.score.result if self._settled else None

    # ── Actions ──────────────────────────────────────────────────────────

    def toggle(self, point: Point) -> frozenset[Point]:
        """Flip the chain at *point*.  Clears both approvals if anything changed."""
        self._ensure_open()
        dead = toggle_dead_chain(self._board, self._dead, point)
        if dead != self._dead:
            self._set_dead(dead)
            self._approved.clear()
        return self._dead

    def approve(self, stone: Stone) -> bool:
        """Record *stone*'s approval.  Returns ``True`` once both have approved."""
        self._ensure_open()
        self._approved.add(stone)
        if len(self._approved) == 2:
            self._settled = True
            _LOGGER.debug("Territory review settled: %s", self.score.result)
        return self._settled

    # ── Internal ─────────────────────────────────────────────────────────

    def _ensure_open(self) -> None:
        if self._settled:
            raise GameOver("Territory review is already settled")

    def _set_dead(self, dead: frozenset[Point]) -> None:
        self._dead = dead
        self._ownership = estimate_territory(self._board, dead)
        self._score = score(self._board, dead, self._komi, self._ownership)
