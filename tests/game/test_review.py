"""Tests for TerritoryReview."""

import pytest

from seki.core.board import Board
from seki.core.enums import Stone
from seki.core.errors import GameOver
from seki.core.move import Move
from seki.core.territory import PlayerPoints
from seki.game.engine import Engine
from seki.game.interfaces import Stage
from seki.game.review import TerritoryReview


@pytest.fixture
def review(alive_with_invader: list[str]) -> TerritoryReview:
    return TerritoryReview.start(Board.from_layout(alive_with_invader), 6.5, playouts=20)


class TestReviewStart:
    def test_suggests_invader_dead(self, review: TerritoryReview) -> None:
        assert review.dead_stones == {(2, 3)}
        assert review.score.black == PlayerPoints(18, 1)
        assert review.score.white == PlayerPoints(0, 0)
        assert review.score.result == "B+12.5"

    def test_explicit_dead_set(self, alive_with_invader: list[str]) -> None:
        board = Board.from_layout(alive_with_invader)
        review = TerritoryReview.start(board, 6.5, dead=())
        assert review.dead_stones == frozenset()
        assert review.score.result == "W+3.5"

    def test_ownership_matches_board(self, review: TerritoryReview) -> None:
        assert len(review.ownership) == 25
        assert review.ownership[0] == 1

    def test_not_settled(self, review: TerritoryReview) -> None:
        assert not review.is_settled
        assert review.result is None
        assert review.approvals == frozenset()


class TestReviewToggle:
    def test_toggle_revives_chain(self, review: TerritoryReview) -> None:
        assert review.toggle((2, 3)) == frozenset()
        assert review.score.black == PlayerPoints(3, 0)
        assert review.score.result == "W+3.5"

    def test_toggle_clears_approvals(self, review: TerritoryReview) -> None:
        review.approve(Stone.BLACK)
        review.toggle((2, 3))
        assert review.approvals == frozenset()

    def test_toggle_on_empty_point_keeps_approvals(self, review: TerritoryReview) -> None:
        review.approve(Stone.BLACK)
        review.toggle((2, 2))
        assert review.approvals == {Stone.BLACK}


class TestReviewApproval:
    def test_both_approve(self, review: TerritoryReview) -> None:
        assert not review.approve(Stone.BLACK)
        assert review.approve(Stone.WHITE)
        assert review.is_settled
        assert review.result == "B+12.5"

    def test_same_color_twice_is_not_enough(self, review: TerritoryReview) -> None:
        review.approve(Stone.WHITE)
        assert not review.approve(Stone.WHITE)

    def test_settled_review_is_frozen(self, review: TerritoryReview) -> None:
        review.approve(Stone.BLACK)
        review.approve(Stone.WHITE)
        with pytest.raises(GameOver):
            review.toggle((2, 3))
        with pytest.raises(GameOver):
            review.approve(Stone.BLACK)

    def test_settled_score_finishes_engine(self) -> None:
        moves = [
            Move.play(Stone.BLACK, (1, 0)),
            Move.play(Stone.WHITE, (2, 3)),
            Move.pass_(Stone.BLACK),
            Move.pass_(Stone.WHITE),
        ]
        engine = Engine(5, 5, moves=moves)
        review = TerritoryReview(engine.board, engine.komi, {(2, 3)})
        review.approve(Stone.BLACK)
        review.approve(Stone.WHITE)
        assert engine.settle(review.score) is Stage.DONE
        assert engine.result == review.result
