"""Tests for Engine."""

from collections.abc import Callable

import pytest

from seki.core.board import Board, Ko
from seki.core.enums import Stone
from seki.core.errors import (
    GameOver,
    InputError,
    KoViolation,
    OccupiedPoint,
    OutOfTurn,
    Suicide,
)
from seki.core.move import Move
from seki.core.territory import GameScore, PlayerPoints
from seki.core.types import Point
from seki.game.engine import Engine
from seki.game.interfaces import DeadStoneSettings, RuleSet, Stage
from seki.game.review import TerritoryReview


class TestEngineSetup:
    def test_new_engine(self) -> None:
        engine = Engine(9, 9)
        assert engine.stage is Stage.UNSTARTED
        assert engine.current_turn_stone is Stone.BLACK
        assert engine.board.is_empty()
        assert engine.result is None

    def test_rectangular(self) -> None:
        engine = Engine(5, 3)
        assert (engine.cols, engine.rows) == (5, 3)
        assert len(engine.board.cells) == 15

    def test_with_moves(self) -> None:
        engine = Engine(4, 4, moves=[Move.play(Stone.BLACK, (0, 0)), Move.play(Stone.WHITE, (1, 0))])
        assert engine.stone_at((0, 0)) is Stone.BLACK
        assert engine.stone_at((1, 0)) is Stone.WHITE
        assert engine.stage is Stage.BLACK_TO_PLAY

    def test_handicap_places_stones(self) -> None:
        engine = Engine(19, 19, RuleSet(handicap=4))
        for point in [(3, 3), (15, 3), (3, 15), (15, 15)]:
            assert engine.stone_at(point) is Stone.BLACK
        assert engine.handicap == 4

    def test_handicap_first_player_defaults_to_white(self) -> None:
        engine = Engine(19, 19, RuleSet(handicap=2))
        assert engine.current_turn_stone is Stone.WHITE
        with pytest.raises(OutOfTurn):
            engine.try_play(Stone.BLACK, (9, 9))

    def test_handicap_first_player_is_configurable(self) -> None:
        engine = Engine(19, 19, RuleSet(handicap=2, handicap_first=Stone.BLACK))
        assert engine.current_turn_stone is Stone.BLACK

    def test_unsupported_handicap(self) -> None:
        with pytest.raises(ValueError):
            Engine(10, 10, RuleSet(handicap=2))


class TestEnginePlay:
    def test_turns_alternate(self) -> None:
        engine = Engine(9, 9)
        assert engine.try_play(Stone.BLACK, (2, 2)) is Stage.WHITE_TO_PLAY
        assert engine.try_play(Stone.WHITE, (6, 6)) is Stage.BLACK_TO_PLAY
        assert engine.moves == (Move.play(Stone.BLACK, (2, 2)), Move.play(Stone.WHITE, (6, 6)))

    def test_out_of_turn_leaves_state(self) -> None:
        engine = Engine(9, 9)
        with pytest.raises(OutOfTurn):
            engine.try_play(Stone.WHITE, (0, 0))
        assert engine.moves == ()
        assert engine.board.is_empty()

    def test_occupied_leaves_state(self) -> None:
        engine = Engine(9, 9)
        engine.try_play(Stone.BLACK, (0, 0))
        board = engine.board
        with pytest.raises(OccupiedPoint):
            engine.try_play(Stone.WHITE, (0, 0))
        assert engine.board == board
        assert len(engine.moves) == 1
        assert engine.current_turn_stone is Stone.WHITE

    def test_capture_tally(self, alternate: Callable[[list[Point]], list[Move]]) -> None:
        engine = Engine(5, 5, moves=alternate([(1, 0), (0, 0)]))
        engine.try_play(Stone.BLACK, (0, 1))
        assert engine.captures.black == 1
        assert engine.stone_at((0, 0)) is None

    def test_suicide(self, alternate: Callable[[list[Point]], list[Move]]) -> None:
        engine = Engine(5, 5, moves=alternate([(1, 0), (4, 4), (0, 1)]))
        with pytest.raises(Suicide):
            engine.try_play(Stone.WHITE, (0, 0))
        assert len(engine.moves) == 3

    def test_ko(self, ko_moves: list[Move]) -> None:
        engine = Engine(4, 4, moves=ko_moves)
        assert engine.ko == Ko((1, 1), Stone.WHITE)
        with pytest.raises(KoViolation):
            engine.try_play(Stone.WHITE, (1, 1))
        engine.try_play(Stone.WHITE, (3, 3))
        engine.try_play(Stone.BLACK, (0, 3))
        engine.try_play(Stone.WHITE, (1, 1))
        assert engine.captures.white == 1

    def test_is_legal(self, ko_moves: list[Move]) -> None:
        engine = Engine(4, 4, moves=ko_moves)
        assert not engine.is_legal((1, 1), Stone.WHITE)
        assert not engine.is_legal((3, 3), Stone.BLACK)
        assert engine.is_legal((3, 3), Stone.WHITE)


class TestEngineStages:
    def test_two_passes_enter_review(self) -> None:
        engine = Engine(9, 9)
        engine.try_play(Stone.BLACK, (4, 4))
        assert engine.try_pass(Stone.WHITE) is Stage.BLACK_TO_PLAY
        assert engine.try_pass(Stone.BLACK) is Stage.TERRITORY_REVIEW

    def test_two_passes_from_start(self) -> None:
        engine = Engine(9, 9)
        engine.try_pass(Stone.BLACK)
        assert engine.try_pass(Stone.WHITE) is Stage.TERRITORY_REVIEW

    def test_pass_clears_ko(self, ko_moves: list[Move]) -> None:
        engine = Engine(4, 4, moves=ko_moves)
        engine.try_pass(Stone.WHITE)
        assert engine.ko is None

    def test_play_during_review_reopens(self) -> None:
        engine = Engine(9, 9)
        engine.try_pass(Stone.BLACK)
        engine.try_pass(Stone.WHITE)
        assert engine.try_play(Stone.BLACK, (4, 4)) is Stage.WHITE_TO_PLAY

    def test_resign(self) -> None:
        engine = Engine(9, 9)
        engine.try_play(Stone.BLACK, (4, 4))
        assert engine.try_resign(Stone.BLACK) is Stage.DONE
        assert engine.result == "W+R"
        assert engine.last_move == Move.resign(Stone.BLACK)

    def test_resign_out_of_turn_is_allowed(self) -> None:
        engine = Engine(9, 9)
        engine.try_resign(Stone.WHITE)
        assert engine.result == "B+R"

    def test_result_restored_from_moves(self) -> None:
        engine = Engine(9, 9, moves=[Move.play(Stone.BLACK, (0, 0)), Move.resign(Stone.WHITE)])
        assert engine.stage is Stage.DONE
        assert engine.result == "B+R"

    def test_timeout(self) -> None:
        engine = Engine(9, 9)
        engine.try_play(Stone.BLACK, (4, 4))
        assert engine.timeout(Stone.WHITE) is Stage.DONE
        assert engine.result == "B+T"

    def test_no_mutation_after_done(self) -> None:
        engine = Engine(9, 9)
        engine.try_resign(Stone.BLACK)
        with pytest.raises(GameOver):
            engine.try_play(Stone.WHITE, (0, 0))
        with pytest.raises(GameOver):
            engine.try_pass(Stone.WHITE)
        with pytest.raises(GameOver):
            engine.undo()
        with pytest.raises(GameOver):
            engine.timeout(Stone.WHITE)
        assert engine.result == "W+R"

    def test_settle(self) -> None:
        engine = Engine(9, 9)
        engine.try_pass(Stone.BLACK)
        engine.try_pass(Stone.WHITE)
        score = GameScore(PlayerPoints(35, 5), PlayerPoints(30, 9), 6.5)
        assert engine.settle(score) is Stage.DONE
        assert engine.result == "W+5.5"

    def test_settle_requires_review(self) -> None:
        engine = Engine(9, 9)
        engine.try_play(Stone.BLACK, (4, 4))
        with pytest.raises(InputError):
            engine.settle("B+1")


class TestEngineUndo:
    def test_undo_replays_remaining_moves(
        self, alternate: Callable[[list[Point]], list[Move]]
    ) -> None:
        engine = Engine(5, 5, moves=alternate([(1, 0), (0, 0), (0, 1)]))
        assert engine.captures.black == 1
        assert engine.undo() is Stage.BLACK_TO_PLAY
        assert engine.captures.black == 0
        assert engine.stone_at((0, 0)) is Stone.WHITE
        assert engine.board == Engine(5, 5, moves=alternate([(1, 0), (0, 0)])).board

    def test_undo_restores_ko(self, ko_moves: list[Move]) -> None:
        engine = Engine(4, 4, moves=ko_moves)
        engine.try_pass(Stone.WHITE)
        engine.undo()
        assert engine.ko == Ko((1, 1), Stone.WHITE)

    def test_undo_leaves_review(self) -> None:
        engine = Engine(9, 9)
        engine.try_pass(Stone.BLACK)
        engine.try_pass(Stone.WHITE)
        assert engine.undo() is Stage.WHITE_TO_PLAY

    def test_undo_keeps_handicap(self) -> None:
        engine = Engine(9, 9, RuleSet(handicap=2))
        engine.try_play(Stone.WHITE, (4, 4))
        engine.undo()
        assert engine.board == Engine(9, 9, RuleSet(handicap=2)).board
        assert engine.stage is Stage.UNSTARTED

    def test_nothing_to_undo(self) -> None:
        with pytest.raises(InputError):
            Engine(9, 9).undo()


class TestEngineEvents:
    def test_callbacks(self) -> None:
        engine = Engine(9, 9)
        moves: list[tuple[Move, Stage]] = []
        stages: list[Stage] = []
        results: list[str] = []
        engine.events.on_move.append(lambda move, stage: moves.append((move, stage)))
        engine.events.on_stage_changed.append(stages.append)
        engine.events.on_result.append(results.append)

        engine.try_play(Stone.BLACK, (0, 0))
        engine.try_pass(Stone.WHITE)
        engine.try_pass(Stone.BLACK)
        engine.try_resign(Stone.WHITE)

        assert moves[0] == (Move.play(Stone.BLACK, (0, 0)), Stage.WHITE_TO_PLAY)
        assert stages == [
            Stage.WHITE_TO_PLAY,
            Stage.BLACK_TO_PLAY,
            Stage.TERRITORY_REVIEW,
            Stage.DONE,
        ]
        assert results == ["B+R"]

    def test_rejected_move_emits_nothing(self) -> None:
        engine = Engine(9, 9)
        calls: list[object] = []
        engine.events.on_move.append(lambda move, stage: calls.append(move))
        with pytest.raises(OutOfTurn):
            engine.try_play(Stone.WHITE, (0, 0))
        assert calls == []


class TestEngineReview:
    def test_start_review(self) -> None:
        engine = Engine(5, 5, RuleSet(komi=0.5))
        engine.try_play(Stone.BLACK, (2, 2))
        engine.try_pass(Stone.WHITE)
        engine.try_pass(Stone.BLACK)
        review = engine.start_review(DeadStoneSettings(playouts=5))
        assert isinstance(review, TerritoryReview)
        assert review.komi == 0.5
        assert review.board == engine.board

    def test_start_review_outside_review(self) -> None:
        with pytest.raises(InputError):
            Engine(5, 5).start_review()

    def test_board_is_shared_value(self) -> None:
        engine = Engine(3, 3)
        assert isinstance(engine.board, Board)
