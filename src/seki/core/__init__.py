"""Core domain layer: pure Go rules with no external dependencies.

Quick start::

    from seki.core import Board, Stone

    board = Board.empty(9, 9)
    board = board.play((2, 2), Stone.BLACK)
    print(board.captures.black, board.is_legal((2, 2), Stone.WHITE))
"""

from seki.core.board import Board, Captures, Ko
from seki.core.enums import EMPTY, MoveKind, Stone
from seki.core.errors import (
    GameOver,
    GoError,
    InputError,
    InvalidMoveKind,
    KoViolation,
    OccupiedPoint,
    OutOfBoundsPoint,
    OutOfTurn,
    SgfError,
    SnapshotError,
    StructuralError,
    Suicide,
    UnknownNode,
)
from seki.core.handicap import handicap_points, max_handicap
from seki.core.move import Move
from seki.core.notation import (
    SgfMetadata,
    game_tree_to_sgf,
    load_sgf,
    parse_sgf,
    sgf_to_game_tree,
)
from seki.core.territory import (
    GameScore,
    PlayerPoints,
    detect_dead_stones,
    estimate_territory,
    find_unconditionally_alive,
    format_result,
    score,
    toggle_dead_chain,
)
from seki.core.tree import GameTree, NodeId, TreeNode
from seki.core.types import Point, parse_sgf_coord, point_name, sgf_coord

__all__ = [
    # Enums
    "EMPTY",
    "MoveKind",
    "Stone",
    # Types / helpers
    "Point",
    "parse_sgf_coord",
    "point_name",
    "sgf_coord",
    # Domain objects
    "Board",
    "Captures",
    "GameTree",
    "Ko",
    "Move",
    "NodeId",
    "TreeNode",
    # Handicap
    "handicap_points",
    "max_handicap",
    # Territory / scoring
    "GameScore",
    "PlayerPoints",
    "detect_dead_stones",
    "estimate_territory",
    "find_unconditionally_alive",
    "format_result",
    "score",
    "toggle_dead_chain",
    # Notation
    "SgfMetadata",
    "game_tree_to_sgf",
    "load_sgf",
    "parse_sgf",
    "sgf_to_game_tree",
    # Errors
    "GameOver",
    "GoError",
    "InputError",
    "InvalidMoveKind",
    "KoViolation",
    "OccupiedPoint",
    "OutOfBoundsPoint",
    "OutOfTurn",
    "SgfError",
    "SnapshotError",
    "StructuralError",
    "Suicide",
    "UnknownNode",
]
