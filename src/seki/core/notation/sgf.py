"""SGF (FF[4]) parsing, serialization and game-tree conversion.

Only the collection grammar is implemented generically; property values are
kept as raw text and interpreted on conversion, so unknown properties pass
through untouched.
"""

from __future__ import annotations

import logging

from seki.core.enums import Stone
from seki.core.errors import SgfError
from seki.core.move import Move
from seki.core.notation.models import (
    MoveTime,
    SgfConversion,
    SgfGameTree,
    SgfMetadata,
    SgfNode,
)
from seki.core.tree import GameTree, NodeId
from seki.core.types import Point, parse_sgf_coord, sgf_coord

_LOGGER = logging.getLogger(__name__)

_MAX_SIZE = 52
# "tt" is the FF[3] pass, only meaningful where it is off the board.
_LEGACY_PASS = "tt"
_LEGACY_PASS_MAX_SIZE = 19


# ── Parsing ──────────────────────────────────────────────────────────────────


class _Parser:
    __slots__ = ("_text", "_pos")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def collection(self) -> list[SgfGameTree]:
        trees: list[SgfGameTree] = []
        self._skip_ws()
        while self._peek() == "(":
            trees.append(self._game_tree())
            self._skip_ws()
        if self._pos < len(self._text):
            raise SgfError(f"Unexpected {self._peek()!r}", self._pos)
        if not trees:
            raise SgfError("Empty SGF collection")
        return trees

    def _game_tree(self) -> SgfGameTree:
        self._expect("(")
        tree = SgfGameTree()
        self._skip_ws()
        if self._peek() != ";":
            raise SgfError("Expected ';' to start a node", self._pos)
        while self._peek() == ";":
            tree.nodes.append(self._node())
            self._skip_ws()
        while self._peek() == "(":
            tree.variations.append(self._game_tree())
            self._skip_ws()
        self._expect(")")
        return tree

    def _node(self) -> SgfNode:
        self._expect(";")
        node = SgfNode()
        self._skip_ws()
        while (ch := self._peek()) is not None and ch.isupper():
            ident = self._ident()
            self._skip_ws()
            if self._peek() != "[":
                raise SgfError(f"Property {ident} has no value", self._pos)
            while self._peek() == "[":
                node.add(ident, self._value())
                self._skip_ws()
        return node

    def _ident(self) -> str:
        start = self._pos
        while (ch := self._peek()) is not None and ch.isupper() and ch.isascii():
            self._pos += 1
        return self._text[start : self._pos]

    def _value(self) -> str:
        self._expect("[")
        chars: list[str] = []
        while True:
            ch = self._peek()
            if ch is None:
                raise SgfError("Unterminated property value", self._pos)
            self._pos += 1
            if ch == "]":
                return "".join(chars)
            if ch != "\\":
                chars.append(ch)
                continue
            escaped = self._peek()
            if escaped is None:
                raise SgfError("Unterminated escape", self._pos)
            self._pos += 1
            # A backslash before a line break is a soft line break.
            if escaped == "\r":
                if self._peek() == "\n":
                    self._pos += 1
            elif escaped != "\n":
                chars.append(escaped)

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            raise SgfError(f"Expected {ch!r}", self._pos)
        self._pos += 1

    def _peek(self) -> str | None:
        return self._text[self._pos] if self._pos < len(self._text) else None

    def _skip_ws(self) -> None:
        while (ch := self._peek()) is not None and ch.isspace():
            self._pos += 1


def parse_sgf(text: str) -> list[SgfGameTree]:
    """Parse an SGF collection.

    Raises:
        SgfError: on any syntax error or an empty collection.
    """
    return _Parser(text).collection()


# ── Serialization ────────────────────────────────────────────────────────────


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("]", "\\]")


def _write_tree(tree: SgfGameTree, parts: list[str]) -> None:
    parts.append("(")
    for node in tree.nodes:
        parts.append(";")
        for ident, values in node.properties.items():
            parts.append(ident)
            parts.extend(f"[{_escape(value)}]" for value in values)
    for variation in tree.variations:
        _write_tree(variation, parts)
    parts.append(")")


def serialize_sgf(collection: list[SgfGameTree]) -> str:
    """Inverse of :func:`parse_sgf` (whitespace is not preserved)."""
    parts: list[str] = []
    for tree in collection:
        _write_tree(tree, parts)
    return "".join(parts)


def format_real(value: float) -> str:
    """SGF real: integral values carry no fractional part."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


# ── SGF → GameTree ───────────────────────────────────────────────────────────


def _parse_number(ident: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise SgfError(f"Invalid number in {ident}: {raw!r}") from None


def _parse_real(ident: str, raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        raise SgfError(f"Invalid real in {ident}: {raw!r}") from None


def _parse_size(raw: str) -> tuple[int, int]:
    if ":" in raw:
        cols_raw, rows_raw = raw.split(":", 1)
        cols, rows = _parse_number("SZ", cols_raw), _parse_number("SZ", rows_raw)
    else:
        cols = rows = _parse_number("SZ", raw)
    if not (1 <= cols <= _MAX_SIZE and 1 <= rows <= _MAX_SIZE):
        raise SgfError(f"Unsupported board size: {raw!r}")
    return cols, rows


def _extract_metadata(root: SgfNode | None) -> SgfMetadata:
    meta = SgfMetadata()
    if root is None:
        return meta

    if (size := root.get("SZ")) is not None:
        meta.cols, meta.rows = _parse_size(size)
    if (komi := root.get("KM")) is not None:
        meta.komi = _parse_real("KM", komi)
    if (handicap := root.get("HA")) is not None:
        meta.handicap = _parse_number("HA", handicap)
    if (time_limit := root.get("TM")) is not None:
        meta.time_limit_secs = _parse_real("TM", time_limit)
    meta.black_name = root.get("PB")
    meta.white_name = root.get("PW")
    meta.game_name = root.get("GN")
    meta.result = root.get("RE")
    meta.overtime = root.get("OT")
    return meta


def _parse_move_point(raw: str, meta: SgfMetadata) -> Point | None:
    raw = raw.strip()
    if not raw:
        return None
    if (
        raw == _LEGACY_PASS
        and meta.cols <= _LEGACY_PASS_MAX_SIZE
        and meta.rows <= _LEGACY_PASS_MAX_SIZE
    ):
        return None
    try:
        col, row = parse_sgf_coord(raw)
    except ValueError as exc:
        raise SgfError(str(exc)) from None
    if not (col < meta.cols and row < meta.rows):
        raise SgfError(f"Move {raw!r} is off a {meta.cols}x{meta.rows} board")
    return col, row


def _node_move(node: SgfNode, meta: SgfMetadata) -> Move | None:
    for ident, stone in (("B", Stone.BLACK), ("W", Stone.WHITE)):
        raw = node.get(ident)
        if raw is None:
            continue
        point = _parse_move_point(raw, meta)
        return Move.pass_(stone) if point is None else Move.play(stone, point)
    return None


def _node_move_time(node: SgfNode) -> MoveTime | None:
    move_time = MoveTime()
    if (raw := node.get("BL")) is not None:
        move_time.black_time = _parse_real("BL", raw)
    if (raw := node.get("WL")) is not None:
        move_time.white_time = _parse_real("WL", raw)
    if (raw := node.get("OB")) is not None:
        move_time.black_periods = _parse_number("OB", raw)
    if (raw := node.get("OW")) is not None:
        move_time.white_periods = _parse_number("OW", raw)
    return None if move_time.is_empty() else move_time


def sgf_to_game_tree(sgf_tree: SgfGameTree) -> SgfConversion:
    """Convert one parsed SGF game into a :class:`GameTree`.

    Nodes without a ``B``/``W`` property are skipped; every variation branches
    from the last move of its parent sequence.

    Raises:
        SgfError: invalid numbers, sizes or coordinates. Nothing is
            returned in that case.
    """
    meta = _extract_metadata(sgf_tree.nodes[0] if sgf_tree.nodes else None)
    tree = GameTree()
    move_times: dict[NodeId, MoveTime] = {}

    stack: list[tuple[SgfGameTree, NodeId | None]] = [(sgf_tree, None)]
    while stack:
        current_tree, parent = stack.pop()
        for node in current_tree.nodes:
            move = _node_move(node, meta)
            if move is None:
                continue
            parent = tree.add_child(parent, move)
            if (move_time := _node_move_time(node)) is not None:
                move_times[parent] = move_time
        # Reversed so variations are added in document order.
        stack.extend((variation, parent) for variation in reversed(current_tree.variations))

    _LOGGER.debug("Imported SGF game: %d nodes, %dx%d", len(tree), meta.cols, meta.rows)
    return SgfConversion(tree=tree, metadata=meta, move_times=move_times)


def load_sgf(text: str) -> SgfConversion:
    """Parse *text* and convert its first game tree."""
    return sgf_to_game_tree(parse_sgf(text)[0])


# ── GameTree → SGF ───────────────────────────────────────────────────────────


def _root_node(meta: SgfMetadata) -> SgfNode:
    root = SgfNode()
    root.add("FF", "4")
    root.add("GM", "1")
    size = str(meta.cols) if meta.cols == meta.rows else f"{meta.cols}:{meta.rows}"
    root.add("SZ", size)
    if meta.komi is not None:
        root.add("KM", format_real(meta.komi))
    if meta.handicap is not None and meta.handicap >= 2:
        root.add("HA", str(meta.handicap))
    for ident, text in (
        ("PB", meta.black_name),
        ("PW", meta.white_name),
        ("GN", meta.game_name),
        ("RE", meta.result),
    ):
        if text is not None:
            root.add(ident, text)
    if meta.time_limit_secs is not None:
        root.add("TM", format_real(meta.time_limit_secs))
    if meta.overtime is not None:
        root.add("OT", meta.overtime)
    return root


def _move_node(move: Move, move_time: MoveTime | None) -> SgfNode:
    node = SgfNode()
    node.add(move.stone.letter, "" if move.point is None else sgf_coord(move.point))
    if move_time is not None:
        if move_time.black_time is not None:
            node.add("BL", format_real(move_time.black_time))
        if move_time.white_time is not None:
            node.add("WL", format_real(move_time.white_time))
        if move_time.black_periods is not None:
            node.add("OB", str(move_time.black_periods))
        if move_time.white_periods is not None:
            node.add("OW", str(move_time.white_periods))
    return node


def _build_line(
    tree: GameTree,
    start: NodeId,
    move_times: dict[NodeId, MoveTime],
) -> SgfGameTree:
    """Follow single children from *start*; a fork turns every child into a variation."""
    line = SgfGameTree()
    current = start
    while True:
        node = tree.node(current)
        # Resignations live in RE, not in the move sequence.
        if node.move.is_resign:
            return line
        line.nodes.append(_move_node(node.move, move_times.get(current)))
        if len(node.children) == 1:
            current = node.children[0]
            continue
        variations = (_build_line(tree, child, move_times) for child in node.children)
        line.variations = [v for v in variations if v.nodes]
        return line


def game_tree_to_sgf(
    tree: GameTree,
    metadata: SgfMetadata,
    move_times: dict[NodeId, MoveTime] | None = None,
) -> str:
    """Serialize *tree* as a single-game SGF document.

    The first root child continues the root sequence; other root children
    become sibling variations.
    """
    times = move_times or {}
    game = SgfGameTree(nodes=[_root_node(metadata)])
    roots = tree.root_children
    if roots:
        main = _build_line(tree, roots[0], times)
        if len(roots) == 1:
            game.nodes.extend(main.nodes)
            game.variations = main.variations
        else:
            lines = [main] + [_build_line(tree, r, times) for r in roots[1:]]
            game.variations = [line for line in lines if line.nodes]
    return serialize_sgf([game])
