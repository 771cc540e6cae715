"""Engine - turn alternation and the game-stage state machine.

Owns the current :class:`Board`, the active move sequence and an optional
result.  The stage is derived from those on every access.  Every action
validates fully before committing, so a raised :class:`InputError` leaves
the engine exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from seki.core.board import Board, Captures, Ko
from seki.core.enums import Stone
from seki.core.errors import GameOver, InputError, OutOfTurn
from seki.core.handicap import handicap_points
from seki.core.move import Move
from seki.core.territory import GameScore
from seki.core.types import Point
from seki.game.interfaces import DeadStoneSettings, RuleSet, Stage
from seki.game.review import TerritoryReview

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, Stage], None]  # move, stage after
StageCallback = Callable[[Stage], None]
ResultCallback = Callable[[str], None]


@dataclass
class EngineEvents:
    """Handlers notified after an action is committed.

    A rejected action leaves the engine unchanged and notifies nobody.
    """

    on_move: list[MoveCallback] = field(default_factory=list)
    on_stage_changed: list[StageCallback] = field(default_factory=list)
    on_result: list[ResultCallback] = field(default_factory=list)


# ── Engine ───────────────────────────────────────────────────────────────────


class Engine:
    """A single Go game on a ``cols x rows`` board.

    Args:
        cols, rows: Board dimensions, fixed for the engine's lifetime.
        rules: Komi and handicap policy.
        moves: Moves to replay onto the initial position.  Turn order is not
            re-checked here, only board legality.
    """

    __slots__ = ("_cols", "_rows", "_rules", "_moves", "_board", "_result", "events")

    def __init__(
        self,
        cols: int = 19,
        rows: int = 19,
        rules: RuleSet | None = None,
        moves: Iterable[Move] = (),
    ) -> None:
        self._cols = cols
        self._rows = rows
        self._rules = rules or RuleSet()
        self._moves: list[Move] = list(moves)
        self._board = self.initial_board().replay(self._moves)
        self._result = _result_from_moves(self._moves)
        self.events = EngineEvents()

    @classmethod
    def from_state(
        cls,
        board: Board,
        moves: Sequence[Move],
        rules: RuleSet | None = None,
        result: str | None = None,
    ) -> Engine:
        """Restore an engine around a cached board without replaying *moves*."""
        engine = cls.__new__(cls)
        engine._cols = board.cols
        engine._rows = board.rows
        engine._rules = rules or RuleSet()
        engine._moves = list(moves)
        engine._board = board
        engine._result = result if result is not None else _result_from_moves(engine._moves)
        engine.events = EngineEvents()
        return engine

    def initial_board(self) -> Board:
        """Empty board with any handicap stones pre-placed."""
        board = Board.empty(self._cols, self._rows)
        if not self._rules.has_handicap:
            return board
        points = handicap_points(self._cols, self._rows, self._rules.handicap)
        if points is None:
            raise ValueError(
                f"Handicap {self._rules.handicap} is not supported on "
                f"{self._cols}x{self._rows}"
            )
        return board.place_setup_stones(points, Stone.BLACK)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def komi(self) -> float:
        return self._rules.komi

    @property
    def handicap(self) -> int:
        return self._rules.handicap

    @property
    def board(self) -> Board:
        return self._board

    @property
    def moves(self) -> tuple[Move, ...]:
        return tuple(self._moves)

    @property
    def last_move(self) -> Move | None:
        return self._moves[-1] if self._moves else None

    @property
    def captures(self) -> Captures:
        return self._board.captures

    @property
    def ko(self) -> Ko | None:
        return self._board.ko

    @property
    def result(self) -> str | None:
        return self._result

    @property
    def current_turn_stone(self) -> Stone:
        if not self._moves:
            return self._rules.handicap_first if self._rules.has_handicap else Stone.BLACK
        return self._moves[-1].stone.opposite

    @property
    def stage(self) -> Stage:
        if self._result is not None:
            return Stage.DONE
        if not self._moves:
            return Stage.UNSTARTED
        if len(self._moves) >= 2 and self._moves[-1].is_pass and self._moves[-2].is_pass:
            return Stage.TERRITORY_REVIEW
        return Stage.to_play(self.current_turn_stone)

    @property
    def is_over(self) -> bool:
        return self._result is not None

    def stone_at(self, point: Point) -> Stone | None:
        return self._board.stone_at(point)

    def is_legal(self, point: Point, stone: Stone) -> bool:
        """Whether *stone* may play at *point* now (turn and board rules)."""
        if self.is_over or stone != self.current_turn_stone:
            return False
        return self._board.is_legal(point, stone)

    # ── Actions ──────────────────────────────────────────────────────────

    def try_play(self, stone: Stone, point: Point) -> Stage:
        """Place a stone.  A play during territory review reopens the game.

        Raises:
            GameOver, OutOfTurn, OutOfBoundsPoint, OccupiedPoint,
            KoViolation, Suicide
        """
        self._ensure_open()
        self._ensure_turn(stone)
        board = self._board.play(point, stone)
        return self._commit(Move.play(stone, point), board)

    def try_pass(self, stone: Stone) -> Stage:
        """Pass; two consecutive passes enter territory review."""
        self._ensure_open()
        self._ensure_turn(stone)
        return self._commit(Move.pass_(stone), self._board.pass_())

    def try_resign(self, stone: Stone) -> Stage:
        """*stone* resigns.  Allowed at any time before the game is over."""
        self._ensure_open()
        before = self.stage
        self._moves.append(Move.resign(stone))
        self._finish(f"{stone.opposite.letter}+R", before)
        return Stage.DONE

    def timeout(self, stone: Stone) -> Stage:
        """*stone* ran out of time; handled like a resignation."""
        self._ensure_open()
        self._finish(f"{stone.opposite.letter}+T", self.stage)
        return Stage.DONE

    def settle(self, score: GameScore | str) -> Stage:
        """Record the agreed score of a territory review."""
        self._ensure_open()
        if self.stage is not Stage.TERRITORY_REVIEW:
            raise InputError(f"Cannot settle a score during {self.stage}")
        result = score if isinstance(score, str) else score.result
        self._finish(result, Stage.TERRITORY_REVIEW)
        return Stage.DONE

    def undo(self) -> Stage:
        """Drop the last move and re-derive the position from the rest."""
        self._ensure_open()
        if not self._moves:
            raise InputError("No move to undo")
        before = self.stage
        moves = self._moves[:-1]
        self._board = self.initial_board().replay(moves)
        undone = self._moves.pop()
        _LOGGER.debug("Undid %s, %d moves remain", undone, len(self._moves))
        self._emit_stage(before)
        return self.stage

    def start_review(self, settings: DeadStoneSettings | None = None) -> TerritoryReview:
        """Open a territory review on the current position."""
        if self.stage is not Stage.TERRITORY_REVIEW:
            raise InputError(f"No territory review during {self.stage}")
        settings = settings or DeadStoneSettings()
        return TerritoryReview.start(
            self._board, self.komi, playouts=settings.playouts, seed=settings.seed
        )

    # ── Internal ─────────────────────────────────────────────────────────

    def _ensure_open(self) -> None:
        if self._result is not None:
            raise GameOver(f"Game is over ({self._result})")

    def _ensure_turn(self, stone: Stone) -> None:
        expected = self.current_turn_stone
        if stone != expected:
            raise OutOfTurn(stone, expected)

    def _commit(self, move: Move, board: Board) -> Stage:
        before = self.stage
        self._board = board
        self._moves.append(move)
        stage = self.stage
        for cb in self.events.on_move:
            cb(move, stage)
        self._emit_stage(before)
        return stage

    def _finish(self, result: str, before: Stage) -> None:
        self._result = result
        _LOGGER.debug("Game finished: %s", result)
        for cb in self.events.on_result:
            cb(result)
        self._emit_stage(before)

    def _emit_stage(self, before: Stage) -> None:
        stage = self.stage
        if stage is before:
            return
        _LOGGER.debug("Stage %s -> %s", before, stage)
        for cb in self.events.on_stage_changed:
            cb(stage)


def _result_from_moves(moves: Sequence[Move]) -> str | None:
    if moves and moves[-1].is_resign:
        return f"{moves[-1].stone.opposite.letter}+R"
    return None
