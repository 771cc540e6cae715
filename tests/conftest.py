"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from seki.core.enums import Stone
from seki.core.move import Move
from seki.core.types import Point

DATA_DIR = Path(__file__).parent / "data"

# A black group with three one-point eyes above a lone white stone.
ALIVE_WITH_INVADER = [
    "+B+B+",
    "BBBBB",
    "+++++",
    "++W++",
    "+++++",
]

# Moves building the classic ko shape, ending with Black's ko capture.
KO_MOVES = [
    Move.play(Stone.BLACK, (1, 0)),
    Move.play(Stone.WHITE, (2, 0)),
    Move.play(Stone.BLACK, (0, 1)),
    Move.play(Stone.WHITE, (1, 1)),
    Move.play(Stone.BLACK, (1, 2)),
    Move.play(Stone.WHITE, (3, 1)),
    Move.pass_(Stone.BLACK),
    Move.play(Stone.WHITE, (2, 2)),
    Move.play(Stone.BLACK, (2, 1)),
]


@pytest.fixture
def ko_moves() -> list[Move]:
    return list(KO_MOVES)


@pytest.fixture
def alive_with_invader() -> list[str]:
    return list(ALIVE_WITH_INVADER)


@pytest.fixture
def alternate() -> Callable[[list[Point]], list[Move]]:
    """Build alternating plays starting with Black."""

    def build(points: list[Point]) -> list[Move]:
        stone = Stone.BLACK
        moves: list[Move] = []
        for point in points:
            moves.append(Move.play(stone, point))
            stone = stone.opposite
        return moves

    return build


@pytest.fixture(scope="session")
def golden_vectors() -> list[dict[str, Any]]:
    with (DATA_DIR / "golden_vectors.json").open(encoding="utf-8") as fh:
        return json.load(fh)
