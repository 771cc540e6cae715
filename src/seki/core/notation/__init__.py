"""Notation package: SGF parsing, serialization and game-tree conversion."""

from seki.core.notation.models import (
    MoveTime,
    SgfConversion,
    SgfGameTree,
    SgfMetadata,
    SgfNode,
)
from seki.core.notation.sgf import (
    format_real,
    game_tree_to_sgf,
    load_sgf,
    parse_sgf,
    serialize_sgf,
    sgf_to_game_tree,
)

__all__ = [
    "MoveTime",
    "SgfConversion",
    "SgfGameTree",
    "SgfMetadata",
    "SgfNode",
    "format_real",
    "game_tree_to_sgf",
    "load_sgf",
    "parse_sgf",
    "serialize_sgf",
    "sgf_to_game_tree",
]
