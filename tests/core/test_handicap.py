"""Tests for handicap stone placement."""

from seki.core.handicap import handicap_points, max_handicap


class TestMaxHandicap:
    def test_large_boards(self) -> None:
        assert max_handicap(19, 19) == 9
        assert max_handicap(13, 13) == 9

    def test_small_boards(self) -> None:
        assert max_handicap(9, 9) == 5
        assert max_handicap(7, 7) == 5

    def test_unsupported_boards(self) -> None:
        assert max_handicap(5, 5) == 0
        assert max_handicap(10, 10) == 0
        assert max_handicap(19, 13) == 0


class TestHandicapPoints:
    def test_four_stones_on_19(self) -> None:
        assert handicap_points(19, 19, 4) == [(3, 3), (15, 3), (3, 15), (15, 15)]

    def test_two_stones_are_opposite_corners(self) -> None:
        assert handicap_points(19, 19, 2) == [(15, 3), (3, 15)]

    def test_nine_stones_include_center(self) -> None:
        points = handicap_points(13, 13, 9)
        assert points is not None
        assert len(set(points)) == 9
        assert (6, 6) in points

    def test_nine_by_nine_uses_third_line(self) -> None:
        assert handicap_points(9, 9, 5) == [(2, 2), (6, 2), (2, 6), (6, 6), (4, 4)]

    def test_out_of_range(self) -> None:
        assert handicap_points(19, 19, 1) is None
        assert handicap_points(19, 19, 10) is None
        assert handicap_points(9, 9, 6) is None
        assert handicap_points(10, 10, 2) is None
