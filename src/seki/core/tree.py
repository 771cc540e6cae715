"""GameTree - branching move history stored as an arena of nodes.

Node ids are indexes into the arena and stay valid for the lifetime of the
tree; removed nodes keep their slot, so ids are never reused.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from seki.core.errors import SnapshotError, UnknownNode
from seki.core.move import Move

NodeId: TypeAlias = int


@dataclass(slots=True)
class TreeNode:
    """A single move in the tree. ``parent is None`` for first moves."""

    move: Move
    parent: NodeId | None
    children: list[NodeId] = field(default_factory=list)
    depth: int = 1


class GameTree:
    """Arena of :class:`TreeNode` with de-duplicated children."""

    __slots__ = ("_nodes", "_root_children", "_removed")

    def __init__(self) -> None:
        self._nodes: list[TreeNode] = []
        self._root_children: list[NodeId] = []
        self._removed: set[NodeId] = set()

    @classmethod
    def from_moves(cls, moves: Iterable[Move]) -> GameTree:
        """Linear tree following *moves*."""
        tree = cls()
        parent: NodeId | None = None
        for move in moves:
            parent = tree.add_child(parent, move)
        return tree

    @classmethod
    def from_nodes(
        cls,
        nodes: Sequence[TreeNode],
        root_children: Sequence[NodeId],
        removed: Iterable[NodeId] = (),
    ) -> GameTree:
        """Rebuild a tree from its arena, checking that every link agrees.

        Raises:
            SnapshotError: dangling or repeated ids, siblings with the same
                move, mismatched parent/child links or cycles.
        """
        size = len(nodes)
        removed_ids = set(removed)

        def check(node_id: NodeId) -> None:
            if not (0 <= node_id < size):
                raise SnapshotError(f"Node id {node_id} out of range")

        def check_siblings(child_ids: Sequence[NodeId], owner: str) -> None:
            if len(set(child_ids)) != len(child_ids):
                raise SnapshotError(f"Repeated child id under {owner}")
            moves = [nodes[child_id].move for child_id in child_ids]
            if len(set(moves)) != len(moves):
                raise SnapshotError(f"Two children of {owner} carry the same move")

        for node_id in removed_ids:
            check(node_id)

        seen_children: set[NodeId] = set()
        for node_id in root_children:
            check(node_id)
            if nodes[node_id].parent is not None:
                raise SnapshotError(f"Root child {node_id} has a parent")
        check_siblings(root_children, "the root")
        for parent_id, node in enumerate(nodes):
            for child_id in node.children:
                check(child_id)
                if child_id in seen_children:
                    raise SnapshotError(f"Node {child_id} listed under two parents")
                seen_children.add(child_id)
                if nodes[child_id].parent != parent_id:
                    raise SnapshotError(
                        f"Node {child_id} does not point back to parent {parent_id}"
                    )
            check_siblings(node.children, f"node {parent_id}")

        tree = cls()
        tree._root_children = list(root_children)
        tree._removed = removed_ids
        tree._nodes = [
            TreeNode(node.move, node.parent, list(node.children), 0) for node in nodes
        ]
        for node_id, node in enumerate(tree._nodes):
            if node.parent is None:
                if node_id not in tree._root_children and node_id not in removed_ids:
                    raise SnapshotError(f"Orphan node {node_id}")
                continue
            check(node.parent)
            if node_id not in tree._nodes[node.parent].children and node_id not in removed_ids:
                raise SnapshotError(f"Node {node_id} missing from parent's children")

        for node_id in range(size):
            tree._nodes[node_id].depth = tree._compute_depth(node_id)
        return tree

    # ── Building ─────────────────────────────────────────────────────────

    def add_child(self, parent: NodeId | None, move: Move) -> NodeId:
        """Append *move* under *parent* (``None`` = root).

        An existing child with the same move is reused instead of duplicated.
        """
        siblings = self.children_of(parent)
        for child_id in siblings:
            if self._nodes[child_id].move == move:
                return child_id

        depth = 1 if parent is None else self._nodes[parent].depth + 1
        node_id = len(self._nodes)
        self._nodes.append(TreeNode(move, parent, [], depth))
        if parent is None:
            self._root_children.append(node_id)
        else:
            self._nodes[parent].children.append(node_id)
        return node_id

    def remove_leaf(self, node_id: NodeId) -> bool:
        """Detach a childless node. Returns ``False`` if it has children."""
        node = self.node(node_id)
        if node.children:
            return False
        self._detach(node_id)
        self._removed.add(node_id)
        return True

    def remove_subtree(self, node_id: NodeId) -> None:
        """Detach *node_id* together with all of its descendants."""
        self.node(node_id)
        self._detach(node_id)
        stack = [node_id]
        while stack:
            current = stack.pop()
            self._removed.add(current)
            stack.extend(self._nodes[current].children)

    # ── Queries ──────────────────────────────────────────────────────────

    def node(self, node_id: NodeId) -> TreeNode:
        if not self.contains(node_id):
            raise UnknownNode(node_id)
        return self._nodes[node_id]

    def contains(self, node_id: NodeId) -> bool:
        return 0 <= node_id < len(self._nodes) and node_id not in self._removed

    def children_of(self, parent: NodeId | None) -> list[NodeId]:
        if parent is None:
            return list(self._root_children)
        return list(self.node(parent).children)

    @property
    def root_children(self) -> list[NodeId]:
        return list(self._root_children)

    @property
    def nodes(self) -> list[TreeNode]:
        """The whole arena, including detached slots."""
        return list(self._nodes)

    @property
    def removed(self) -> frozenset[NodeId]:
        return frozenset(self._removed)

    def depth(self, node_id: NodeId) -> int:
        return self.node(node_id).depth

    def path_to(self, node_id: NodeId) -> list[NodeId]:
        """Ids from the first move down to *node_id* (root-first)."""
        path: list[NodeId] = []
        self.node(node_id)
        current: NodeId | None = node_id
        while current is not None:
            path.append(current)
            current = self._nodes[current].parent
        path.reverse()
        return path

    def moves_to(self, node_id: NodeId) -> list[Move]:
        return [self._nodes[i].move for i in self.path_to(node_id)]

    def main_line(self) -> list[NodeId]:
        """Path following the first child from the root to a leaf."""
        path: list[NodeId] = []
        children = self._root_children
        while children:
            path.append(children[0])
            children = self._nodes[children[0]].children
        return path

    def is_empty(self) -> bool:
        return not self._root_children

    def __len__(self) -> int:
        return len(self._nodes) - len(self._removed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameTree):
            return NotImplemented
        return (
            self._nodes == other._nodes
            and self._root_children == other._root_children
            and self._removed == other._removed
        )

    # ── Internal ─────────────────────────────────────────────────────────

    def _detach(self, node_id: NodeId) -> None:
        parent = self._nodes[node_id].parent
        siblings = self._root_children if parent is None else self._nodes[parent].children
        siblings.remove(node_id)

    def _compute_depth(self, node_id: NodeId) -> int:
        depth = 0
        current: NodeId | None = node_id
        while current is not None:
            depth += 1
            if depth > len(self._nodes):
                raise SnapshotError(f"Cycle through node {node_id}")
            current = self._nodes[current].parent
        return depth
