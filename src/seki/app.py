"""Command-line entry point: inspect an SGF game record."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from seki.core.board import Board
from seki.core.enums import Stone
from seki.core.notation import load_sgf
from seki.core.territory import DEFAULT_PLAYOUTS, DEFAULT_SEED
from seki.core.types import point_name, sgf_coord
from seki.game.engine import Engine
from seki.game.interfaces import RuleSet
from seki.game.review import TerritoryReview

_LOGGER = logging.getLogger(__name__)
_GLYPHS = {Stone.BLACK: "X", Stone.WHITE: "O", None: "."}


def _column_label(col: int) -> str:
    try:
        return point_name((col, 0), 1)[0]
    except ValueError:
        return sgf_coord((col, 0))[0]


def render_board(board: Board) -> str:
    """Text diagram with GTP-style coordinates (columns skip ``I``)."""
    header = "   " + " ".join(_column_label(c) for c in range(board.cols))
    lines = [header]
    for row in range(board.rows):
        cells = " ".join(_GLYPHS[board.stone_at((col, row))] for col in range(board.cols))
        lines.append(f"{board.rows - row:>2} {cells}")
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seki", description=__doc__)
    parser.add_argument("sgf", type=Path, help="SGF file to load")
    parser.add_argument(
        "--moves",
        type=int,
        default=None,
        help="replay only the first N moves of the main line",
    )
    parser.add_argument(
        "--score",
        action="store_true",
        help="estimate dead stones and print the resulting score",
    )
    parser.add_argument("--playouts", type=int, default=DEFAULT_PLAYOUTS)
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def run(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        conversion = load_sgf(args.sgf.read_text(encoding="utf-8"))
        meta = conversion.metadata
        tree = conversion.tree
        moves = [tree.node(node_id).move for node_id in tree.main_line()]
        if args.moves is not None:
            moves = moves[: max(args.moves, 0)]
        rules = RuleSet(
            komi=meta.komi if meta.komi is not None else RuleSet().komi,
            # Some servers record HA[1] for a game without handicap stones.
            handicap=meta.handicap if meta.handicap and meta.handicap >= 2 else 0,
        )
        engine = Engine(meta.cols, meta.rows, rules, moves)
    except (OSError, ValueError) as exc:
        _LOGGER.debug("Failed to load %s", args.sgf, exc_info=True)
        print(f"seki: {exc}", file=sys.stderr)
        return 1

    print(render_board(engine.board))
    print(f"Moves: {len(engine.moves)}  Stage: {engine.stage}")
    print(f"Captures: B {engine.captures.black}  W {engine.captures.white}")
    if engine.result is not None:
        print(f"Result: {engine.result}")
    elif meta.result:
        print(f"Recorded result: {meta.result}")

    if args.score:
        review = TerritoryReview.start(
            engine.board, engine.komi, playouts=args.playouts, seed=args.seed
        )
        game_score = review.score
        print(
            f"Score: B {game_score.display_total(Stone.BLACK)}  "
            f"W {game_score.display_total(Stone.WHITE)}  ({game_score.result})"
        )
    return 0


def main() -> None:
    """Console-script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
