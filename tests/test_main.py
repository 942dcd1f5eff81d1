"""
Tests for the command line entry point.
"""
import json
import os
import sys

import numpy as np
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

import codec
from main import load_game, main
from model import Door, Piece, Placement, Step, make_game_data
from grid import Direction


def write_puzzle(tmp_path, name="puzzle.json", wrap=True):
    king = Piece(shape=np.ones((1, 2), dtype=bool), position=(2, 1)).rebuild(4, 4)
    blocker = Piece.single((0, 0), 4, 4)
    door = Door(placement=Placement.BOTTOM, start_index=1, x_size=2, y_size=1)
    flat = codec.encode(make_game_data(4, 4, [king, blocker], 0, door))
    path = tmp_path / name
    path.write_text(json.dumps({"name": "t", "gameShape": flat} if wrap else flat))
    return str(path)


def test_load_game_formats(tmp_path):
    wrapped = load_game(write_puzzle(tmp_path, "a.json"))
    bare = load_game(write_puzzle(tmp_path, "b.json", wrap=False))
    assert wrapped.piece_list == bare.piece_list
    assert wrapped.king_win_pos == (3, 1)


def test_show(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "none.json"), "show", write_puzzle(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "Board: 4x4, 2 pieces" in out
    assert "Door: bottom at 1" in out


def test_moves(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "none.json"), "moves", write_puzzle(tmp_path), "--piece", "1"]) == 0
    out = capsys.readouterr().out
    assert "Piece 1 at (0, 0)" in out
    assert "right: [(0, 1), (0, 2), (0, 3)]" in out


def test_replay(tmp_path, capsys):
    game = load_game(write_puzzle(tmp_path))
    game.solution = [Step(0, Direction.DOWN)]
    path = tmp_path / "solved.json"
    path.write_text(json.dumps(game.to_dict()))
    assert main(["--config", str(tmp_path / "none.json"), "replay", str(path)]) == 0
    assert "Solved!" in capsys.readouterr().out


def test_hash_matches_codec(tmp_path, capsys):
    path = write_puzzle(tmp_path)
    assert main(["--config", str(tmp_path / "none.json"), "hash", path]) == 0
    assert codec.identity_hash(load_game(path)) in capsys.readouterr().out


def test_bad_file_reports_error(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([[0]]))
    assert main(["--config", str(tmp_path / "none.json"), "show", str(path)]) == 1
    assert "ERROR" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
