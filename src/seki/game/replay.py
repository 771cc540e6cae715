"""Replay - navigation over a branching game tree.

A cursor points at a tree node (``None`` = before the first move).  The
engine for the cursor is always rebuilt by replaying the moves on the path
to it, so every view is bit-identical to a fresh derivation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from seki.core.board import Board
from seki.core.errors import InputError, SnapshotError
from seki.core.move import Move
from seki.core.tree import GameTree, NodeId
from seki.core.types import Point
from seki.game.engine import Engine
from seki.game.interfaces import RuleSet

_LOGGER = logging.getLogger(__name__)


class Replay:
    """Game tree + cursor + the engine for the cursor position.

    ``path`` remembers the last branch visited below the cursor so that
    :meth:`forward` and :meth:`to_latest` return along it.
    """

    __slots__ = ("_cols", "_rows", "_rules", "_tree", "_current", "_path", "_engine")

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
        self._tree = GameTree.from_moves(moves)
        self._path = self._tree.main_line()
        self._current: NodeId | None = self._path[-1] if self._path else None
        self._engine = self._build_engine()

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
    def engine(self) -> Engine:
        return self._engine

    @property
    def tree(self) -> GameTree:
        return self._tree

    @property
    def current_node(self) -> NodeId | None:
        return self._current

    @property
    def moves(self) -> list[Move]:
        return [] if self._current is None else self._tree.moves_to(self._current)

    @property
    def view_index(self) -> int:
        return 0 if self._current is None else self._tree.depth(self._current)

    @property
    def total_moves(self) -> int:
        leaf = self._leaf_from_current()
        return self.view_index if leaf is None else self._tree.depth(leaf)

    @property
    def is_at_start(self) -> bool:
        return self._current is None

    @property
    def is_at_latest(self) -> bool:
        return not self._tree.children_of(self._current)

    @property
    def last_move(self) -> Move | None:
        return None if self._current is None else self._tree.node(self._current).move

    @property
    def last_play_point(self) -> Point | None:
        move = self.last_move
        return move.point if move is not None and move.is_play else None

    def set_rules(self, rules: RuleSet) -> None:
        """Swap the rule set.

        Raises:
            InputError: a move in the tree cannot be played under *rules*
                (e.g. it lands on a new handicap stone).
            ValueError: the handicap does not fit the board.

        On failure the replay keeps its previous rules.
        """
        _check_playable(self._tree, Engine(self._cols, self._rows, rules).board)
        engine = Engine(self._cols, self._rows, rules, self.moves)
        self._rules = rules
        self._engine = engine

    # ── Editing ──────────────────────────────────────────────────────────

    def try_play(self, point: Point) -> bool:
        """Play for the side to move at the cursor.  ``False`` if illegal."""
        stone = self._engine.current_turn_stone
        try:
            self._engine.try_play(stone, point)
        except InputError as exc:
            _LOGGER.debug("Rejected play at %s: %s", point, exc)
            return False
        self._advance(Move.play(stone, point))
        return True

    def pass_(self) -> bool:
        stone = self._engine.current_turn_stone
        try:
            self._engine.try_pass(stone)
        except InputError as exc:
            _LOGGER.debug("Rejected pass: %s", exc)
            return False
        self._advance(Move.pass_(stone))
        return True

    def undo(self) -> bool:
        """Delete the cursor node if it is a leaf and step back to its parent."""
        if self._current is None:
            return False
        parent = self._tree.node(self._current).parent
        if not self._tree.remove_leaf(self._current):
            return False
        self._move_cursor(parent)
        return True

    def remove_subtree(self, node_id: NodeId) -> bool:
        """Delete *node_id* and its descendants.  ``False`` for unknown ids.

        A cursor inside the removed branch moves to the branch's parent.
        """
        if not self._tree.contains(node_id):
            return False
        parent = self._tree.node(node_id).parent
        inside = self._current is not None and node_id in self._tree.path_to(self._current)
        self._tree.remove_subtree(node_id)
        if inside:
            self._move_cursor(parent)
        elif node_id in self._path:
            self._path = self._path[: self._path.index(node_id)]
        return True

    def replace_moves(self, moves: Iterable[Move]) -> None:
        self.replace_tree(GameTree.from_moves(moves))

    def replace_tree(self, tree: GameTree) -> None:
        """Swap in *tree* and jump to the end of its main line.

        Raises:
            SnapshotError: some move in *tree* cannot be replayed.  The
                previous tree, cursor and engine stay in place.
        """
        try:
            _check_playable(tree, self._engine.initial_board())
        except InputError as exc:
            raise SnapshotError(f"Game tree cannot be replayed: {exc}") from None
        path = tree.main_line()
        current = path[-1] if path else None
        engine = Engine(
            self._cols, self._rows, self._rules, () if current is None else tree.moves_to(current)
        )
        self._tree = tree
        self._path = path
        self._current = current
        self._engine = engine

    def merge_base_moves(self, moves: Iterable[Move]) -> NodeId | None:
        """Graft an authoritative move list into the tree without moving the cursor.

        Returns the node of the last merged move.  When the merge added
        nodes, the remembered path is redirected to that tip.

        Raises:
            InputError: *moves* cannot be replayed; the tree is unchanged.
        """
        moves = list(moves)
        Engine(self._cols, self._rows, self._rules, moves)
        before = len(self._tree)
        parent: NodeId | None = None
        for move in moves:
            parent = self._tree.add_child(parent, move)
        if len(self._tree) > before and parent is not None:
            self._path = self._tree.path_to(parent)
        return parent

    # ── Navigation ───────────────────────────────────────────────────────

    def back(self) -> bool:
        if self._current is None:
            return False
        self._current = self._tree.node(self._current).parent
        self._rebuild()
        return True

    def forward(self) -> bool:
        children = self._tree.children_of(self._current)
        if not children:
            return False
        depth = self.view_index
        if depth < len(self._path) and self._path[depth] in children:
            nxt = self._path[depth]
        else:
            nxt = children[0]
            self._path = self._path[:depth] + [nxt]
        self._current = nxt
        self._rebuild()
        return True

    def to_start(self) -> None:
        self._current = None
        self._rebuild()

    def to_latest(self) -> None:
        self._current = self._leaf_from_current()
        if self._current is not None:
            self._path = self._tree.path_to(self._current)
        self._rebuild()

    def navigate(self, node_id: NodeId) -> None:
        """Jump to *node_id*.

        Raises:
            UnknownNode: *node_id* is not in the tree.
        """
        self._path = self._tree.path_to(node_id)
        self._current = node_id
        self._rebuild()

    # ── Internal ─────────────────────────────────────────────────────────

    def _advance(self, move: Move) -> None:
        node_id = self._tree.add_child(self._current, move)
        self._current = node_id
        self._path = self._tree.path_to(node_id)

    def _move_cursor(self, node_id: NodeId | None) -> None:
        self._current = node_id
        self._path = [] if node_id is None else self._tree.path_to(node_id)
        self._rebuild()

    def _leaf_from_current(self) -> NodeId | None:
        current = self._current
        depth = self.view_index
        while True:
            children = self._tree.children_of(current)
            if not children:
                return current
            if depth < len(self._path) and self._path[depth] in children:
                current = self._path[depth]
            else:
                current = children[0]
            depth += 1

    def _build_engine(self) -> Engine:
        return Engine(self._cols, self._rows, self._rules, self.moves)

    def _rebuild(self) -> None:
        self._engine = self._build_engine()


def _check_playable(tree: GameTree, initial: Board) -> None:
    """Replay every branch of *tree* from *initial*; raises the first ``InputError``."""
    stack = [(node_id, initial) for node_id in tree.root_children]
    while stack:
        node_id, board = stack.pop()
        after = board.apply(tree.node(node_id).move)
        stack.extend((child, after) for child in tree.children_of(node_id))
