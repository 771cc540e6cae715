"""Tests for Move, Stone and coordinate helpers."""

import pytest

from seki.core.enums import MoveKind, Stone
from seki.core.errors import InputError, InvalidMoveKind
from seki.core.move import Move
from seki.core.types import (
    parse_sgf_coord,
    point_from_index,
    point_index,
    point_name,
    sgf_coord,
)


class TestStone:
    def test_opposite(self) -> None:
        assert Stone.BLACK.opposite is Stone.WHITE
        assert -Stone.WHITE is Stone.BLACK

    def test_from_int_normalises_sign(self) -> None:
        assert Stone.from_int(7) is Stone.BLACK
        assert Stone.from_int(-2) is Stone.WHITE
        assert Stone.from_int(0) is None

    def test_letters(self) -> None:
        assert Stone.BLACK.letter == "B"
        assert Stone.from_letter("w") is Stone.WHITE
        with pytest.raises(ValueError):
            Stone.from_letter("x")

    def test_str(self) -> None:
        assert str(Stone.WHITE) == "White"


class TestMove:
    def test_factories(self) -> None:
        assert Move.play(Stone.BLACK, (3, 4)).is_play
        assert Move.pass_(Stone.WHITE).is_pass
        assert Move.resign(Stone.BLACK).is_resign

    def test_play_requires_point(self) -> None:
        with pytest.raises(InvalidMoveKind):
            Move(MoveKind.PLAY, Stone.BLACK)

    def test_pass_rejects_point(self) -> None:
        with pytest.raises(InvalidMoveKind):
            Move(MoveKind.PASS, Stone.BLACK, (0, 0))

    def test_invalid_kind_is_input_error(self) -> None:
        with pytest.raises(InputError):
            Move(MoveKind.RESIGN, Stone.WHITE, (1, 1))

    def test_value_equality(self) -> None:
        assert Move.play(Stone.BLACK, (1, 2)) == Move.play(Stone.BLACK, (1, 2))
        assert Move.play(Stone.BLACK, (1, 2)) != Move.play(Stone.WHITE, (1, 2))

    def test_dict_round_trip(self) -> None:
        move = Move.play(Stone.WHITE, (5, 6))
        data = move.to_dict()
        assert data == {"kind": "play", "stone": -1, "point": [5, 6]}
        assert Move.from_dict(data) == move
        assert Move.from_dict(Move.pass_(Stone.BLACK).to_dict()) == Move.pass_(Stone.BLACK)

    def test_str(self) -> None:
        assert str(Move.pass_(Stone.BLACK)) == "B pass"


class TestCoordinates:
    def test_index_round_trip(self) -> None:
        assert point_index((2, 3), 5) == 17
        assert point_from_index(17, 5) == (2, 3)

    def test_sgf_coord(self) -> None:
        assert sgf_coord((2, 3)) == "cd"
        assert sgf_coord((26, 0)) == "Aa"
        assert parse_sgf_coord("cd") == (2, 3)
        assert parse_sgf_coord("Aa") == (26, 0)

    def test_parse_sgf_coord_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            parse_sgf_coord("c")
        with pytest.raises(ValueError):
            parse_sgf_coord("c1")

    def test_point_name_skips_i(self) -> None:
        assert point_name((3, 15), 19) == "D4"
        assert point_name((8, 0), 19) == "J19"
