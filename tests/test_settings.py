import logging
from pathlib import Path

from gridsearch.app.settings import (
    DEFAULT_SPEED,
    MAP_FILES,
    resolve_settings,
)


def test_defaults():
    s = resolve_settings([], env={})
    assert s.map_path == MAP_FILES["01_diagonal_5"]
    assert s.speed == DEFAULT_SPEED
    assert s.log_level == logging.WARNING
    assert s.step is False


def test_argument_overrides_environment():
    env = {"GRIDSEARCH_MAP": "from_env.json", "GRIDSEARCH_SPEED": "3"}
    assert resolve_settings([], env=env).map_path == Path("from_env.json")
    assert resolve_settings([], env=env).speed == 3

    s = resolve_settings(["--map=03_scatter_30", "--speed=12"], env=env)
    assert s.map_path == MAP_FILES["03_scatter_30"]
    assert s.speed == 12


def test_speed_is_clamped_and_bad_values_ignored():
    assert resolve_settings(["--speed=500"], env={}).speed == 60
    assert resolve_settings(["--speed=0"], env={}).speed == 1
    assert resolve_settings(["--speed=fast"], env={}).speed == DEFAULT_SPEED


def test_log_level_and_flags():
    assert resolve_settings([], env={"GRIDSEARCH_LOG_LEVEL": "info"}).log_level == logging.INFO
    assert resolve_settings(["--verbose"], env={}).log_level == logging.DEBUG
    assert resolve_settings(["--step"], env={}).step is True
