import pytest

from gridsearch.app.cli import main
from gridsearch.app.settings import MAP_FILES


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("GRIDSEARCH_MAP", "GRIDSEARCH_SPEED", "GRIDSEARCH_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_found_path_exits_zero(capsys):
    assert main([f"--map={MAP_FILES['01_diagonal_5']}"]) == 0
    out = capsys.readouterr().out
    assert "Path: (0,0) (1,0) (2,1) (3,2) (4,3) (4,4)" in out
    assert "Length: 6 cells, cost 6.2426" in out


def test_no_path_exits_one(capsys):
    assert main(["--map=02_walled_3"]) == 1
    assert "No path (expanded 3)" in capsys.readouterr().out


def test_missing_map_exits_two(tmp_path, capsys):
    assert main([f"--map={tmp_path / 'nope.json'}"]) == 2
    assert "Failed to load map" in capsys.readouterr().err


def test_step_mode_prints_each_step(capsys):
    assert main(["--map=02_walled_3", "--step"]) == 1
    out = capsys.readouterr().out
    assert "-- step 1: current=(0, 0) open=1" in out
    assert "-- step 3:" in out
    assert "-- step 4:" not in out


def test_malformed_map_exits_two(tmp_path, capsys):
    p = tmp_path / "bad_cells.json"
    p.write_text('{"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0], "cells": 5}')
    assert main([f"--map={p}"]) == 2
    assert "cells must be a list of rows" in capsys.readouterr().err
