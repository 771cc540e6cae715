"""Tests for the command-line entry point."""

from pathlib import Path

import pytest

from seki.app import render_board, run
from seki.core.board import Board


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "game.sgf"
    path.write_text(text, encoding="utf-8")
    return path


class TestRenderBoard:
    def test_labels_skip_i(self) -> None:
        header = render_board(Board.empty(9, 9)).split("\n")[0]
        assert header.split() == list("ABCDEFGHJ")

    def test_stones(self) -> None:
        lines = render_board(Board.from_layout(["B+", "+W"])).split("\n")
        assert lines[1] == " 2 X ."
        assert lines[2] == " 1 . O"


class TestRun:
    def test_prints_position(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path, "(;SZ[9]KM[6.5];B[cc];W[gg];B[dd])")
        assert run([str(path)]) == 0
        out = capsys.readouterr().out
        assert "Moves: 3  Stage: white_to_play" in out
        assert "Captures: B 0  W 0" in out

    def test_moves_limit(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path, "(;SZ[9];B[cc];W[gg];B[dd])")
        assert run([str(path), "--moves", "1"]) == 0
        assert "Moves: 1  Stage: white_to_play" in capsys.readouterr().out

    def test_result(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path, "(;SZ[9]RE[W+R];B[cc])")
        assert run([str(path)]) == 0
        assert "Recorded result: W+R" in capsys.readouterr().out

    def test_score(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path, "(;SZ[5]KM[0.5];B[cc];W[];B[])")
        assert run([str(path), "--score", "--playouts", "5"]) == 0
        assert "Score: B " in capsys.readouterr().out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run([str(tmp_path / "nope.sgf")]) == 1
        assert capsys.readouterr().err.startswith("seki: ")

    def test_malformed_sgf(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path, "(;SZ[9];B[cc]")
        assert run([str(path)]) == 1
        assert "seki: " in capsys.readouterr().err
