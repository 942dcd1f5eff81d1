"""
Tests for the settings file and board size clamping.
"""
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from config import Config


def test_clamp_board_size():
    cfg = Config()
    assert cfg.clamp_board_size(1) == 2
    assert cfg.clamp_board_size(5) == 5
    assert cfg.clamp_board_size(12) == 9


def test_save_and_load(tmp_path):
    path = str(tmp_path / "config.json")
    cfg = Config()
    cfg.MAX_BOARD_SIZE = 7
    cfg.CORNER_RADIUS_RATIO = 0.2
    cfg.save(path)

    loaded = Config()
    loaded.load(path)
    assert loaded.MAX_BOARD_SIZE == 7
    assert loaded.CORNER_RADIUS_RATIO == 0.2
    assert loaded.clamp_board_size(8) == 7


def test_load_missing_file_keeps_defaults(tmp_path):
    cfg = Config()
    cfg.load(str(tmp_path / "missing.json"))
    assert cfg.MAX_BOARD_SIZE == 9


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
