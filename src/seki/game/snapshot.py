"""Engine and game-tree snapshots as plain JSON-compatible dicts.

Payloads are validated with pydantic models before anything is built; any
corrupt payload raises :class:`SnapshotError` and never yields a partial
engine or tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from seki.core.board import Board, Captures, Ko
from seki.core.enums import MoveKind, Stone
from seki.core.errors import InvalidMoveKind, SnapshotError
from seki.core.move import Move
from seki.core.tree import GameTree, TreeNode
from seki.game.engine import Engine
from seki.game.interfaces import RuleSet, Stage

_LOGGER = logging.getLogger(__name__)

_MAX_SIZE = 52


# ── Schemas ──────────────────────────────────────────────────────────────────


class MoveSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: MoveKind
    stone: Stone
    point: tuple[int, int] | None = None


class CapturesSchema(BaseModel):
    black: int = Field(ge=0)
    white: int = Field(ge=0)


class KoSchema(BaseModel):
    point: tuple[int, int]
    stone: Stone


class RulesSchema(BaseModel):
    komi: float = 6.5
    handicap: int = 0
    handicap_first: Stone = Stone.WHITE


class EngineSnapshot(BaseModel):
    """Cached engine state: board, captures, ko, stage and the move list."""

    cols: int = Field(gt=0, le=_MAX_SIZE)
    rows: int = Field(gt=0, le=_MAX_SIZE)
    board: list[int]
    captures: CapturesSchema
    ko: KoSchema | None = None
    stage: Stage
    moves: list[MoveSchema] = Field(default_factory=list)
    result: str | None = None
    rules: RulesSchema = Field(default_factory=RulesSchema)

    @field_validator("board")
    @classmethod
    def _check_cells(cls, cells: list[int]) -> list[int]:
        if any(cell not in (-1, 0, 1) for cell in cells):
            raise ValueError("board cells must be -1, 0 or 1")
        return cells


class TreeNodeSchema(BaseModel):
    move: MoveSchema
    parent: int | None = None
    children: list[int] = Field(default_factory=list)


class TreeSnapshot(BaseModel):
    nodes: list[TreeNodeSchema] = Field(default_factory=list)
    root_children: list[int] = Field(default_factory=list)
    removed: list[int] = Field(default_factory=list)


# ── Helpers ──────────────────────────────────────────────────────────────────


def _move_schema(move: Move) -> MoveSchema:
    return MoveSchema(kind=move.kind, stone=move.stone, point=move.point)


def _to_moves(schemas: Iterable[MoveSchema]) -> list[Move]:
    try:
        return [Move(s.kind, s.stone, s.point) for s in schemas]
    except InvalidMoveKind as exc:
        raise SnapshotError(f"Invalid move in snapshot: {exc}") from None


def _validate(model: type[BaseModel], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        _LOGGER.warning("Rejected %s payload: %d errors", model.__name__, exc.error_count())
        raise SnapshotError(f"Invalid {model.__name__}: {exc}") from None


# ── Engine ───────────────────────────────────────────────────────────────────


def serialize(engine: Engine) -> dict[str, Any]:
    """Snapshot *engine* into a JSON-compatible dict."""
    board = engine.board
    ko = board.ko
    snapshot = EngineSnapshot(
        cols=board.cols,
        rows=board.rows,
        board=list(board.cells),
        captures=CapturesSchema(black=board.captures.black, white=board.captures.white),
        ko=None if ko is None else KoSchema(point=ko.point, stone=ko.stone),
        stage=engine.stage,
        moves=[_move_schema(m) for m in engine.moves],
        result=engine.result,
        rules=RulesSchema(
            komi=engine.rules.komi,
            handicap=engine.rules.handicap,
            handicap_first=engine.rules.handicap_first,
        ),
    )
    return snapshot.model_dump(mode="json")


def deserialize(payload: Mapping[str, Any], *, moves: Iterable[Move] | None = None) -> Engine:
    """Restore an engine from :func:`serialize` output without replaying moves.

    *moves* overrides the move list stored in the payload (e.g. when the
    caller keeps moves in a separate table).

    Raises:
        SnapshotError: malformed payload, or a stage that does not match
            the moves and result it came with.
    """
    snapshot: EngineSnapshot = _validate(EngineSnapshot, payload)
    move_list = list(moves) if moves is not None else _to_moves(snapshot.moves)

    try:
        rules = RuleSet(
            komi=snapshot.rules.komi,
            handicap=snapshot.rules.handicap,
            handicap_first=snapshot.rules.handicap_first,
        )
        ko = None if snapshot.ko is None else Ko(snapshot.ko.point, snapshot.ko.stone)
        board = Board(
            snapshot.cols,
            snapshot.rows,
            snapshot.board,
            Captures(snapshot.captures.black, snapshot.captures.white),
            ko,
        )
    except ValueError as exc:
        raise SnapshotError(f"Invalid engine snapshot: {exc}") from None
    if ko is not None and not board.on_board(ko.point):
        raise SnapshotError(f"Ko point {ko.point} is off the board")

    engine = Engine.from_state(board, move_list, rules, snapshot.result)
    if engine.stage is not snapshot.stage:
        raise SnapshotError(
            f"Snapshot stage {snapshot.stage} does not match derived stage {engine.stage}"
        )
    return engine


# ── Game tree ────────────────────────────────────────────────────────────────


def serialize_tree(tree: GameTree) -> dict[str, Any]:
    """Snapshot *tree* keeping node ids, including detached slots."""
    snapshot = TreeSnapshot(
        nodes=[
            TreeNodeSchema(move=_move_schema(n.move), parent=n.parent, children=n.children)
            for n in tree.nodes
        ],
        root_children=tree.root_children,
        removed=sorted(tree.removed),
    )
    return snapshot.model_dump(mode="json")


def deserialize_tree(payload: Mapping[str, Any]) -> GameTree:
    """Inverse of :func:`serialize_tree`; the result has the same node ids."""
    snapshot: TreeSnapshot = _validate(TreeSnapshot, payload)
    moves = _to_moves(n.move for n in snapshot.nodes)
    nodes = [
        TreeNode(move, n.parent, list(n.children))
        for move, n in zip(moves, snapshot.nodes, strict=True)
    ]
    return GameTree.from_nodes(nodes, snapshot.root_children, snapshot.removed)
