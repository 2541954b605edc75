# gridsearch/app/settings.py
#!/usr/bin/env python3
"""
Runtime settings shared by the CLI and the viewer.

Each value comes from the environment first, then a --key=value argument:
    GRIDSEARCH_MAP        / --map=PATH
    GRIDSEARCH_SPEED      / --speed=N       (viewer steps per second)
    GRIDSEARCH_LOG_LEVEL  / --verbose       (DEBUG when --verbose is given)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"
MAP_FILES: Dict[str, Path] = {
    "01_diagonal_5": MAP_DIR / "01_diagonal_5.json",
    "02_walled_3":   MAP_DIR / "02_walled_3.json",
    "03_scatter_30": MAP_DIR / "03_scatter_30.json",
}
DEFAULT_MAP = "01_diagonal_5"
DEFAULT_SPEED = 8
MIN_SPEED, MAX_SPEED = 1, 60


@dataclass
class Settings:
    map_path: Path
    speed: int = DEFAULT_SPEED
    log_level: int = logging.WARNING
    step: bool = False


def _arg_value(argv: Sequence[str], key: str) -> Optional[str]:
    value = None
    for arg in argv:
        if arg.startswith(f"--{key}="):
            value = arg.split("=", 1)[1]
    return value


def resolve_map(name_or_path: str) -> Path:
    """Accept a bundled map key ("03_scatter_30") or a file path."""
    if name_or_path in MAP_FILES:
        return MAP_FILES[name_or_path]
    return Path(name_or_path)


def clamp_speed(v: int) -> int:
    return int(max(MIN_SPEED, min(MAX_SPEED, v)))


def resolve_settings(argv: Optional[List[str]] = None, env: Optional[Dict[str, str]] = None) -> Settings:
    argv = list(argv or [])
    env = os.environ if env is None else env

    map_arg = env.get("GRIDSEARCH_MAP", DEFAULT_MAP)
    map_arg = _arg_value(argv, "map") or map_arg

    raw_speed = _arg_value(argv, "speed") or env.get("GRIDSEARCH_SPEED")
    try:
        speed = clamp_speed(int(raw_speed)) if raw_speed else DEFAULT_SPEED
    except ValueError:
        speed = DEFAULT_SPEED

    level_name = env.get("GRIDSEARCH_LOG_LEVEL", "WARNING").upper()
    log_level = getattr(logging, level_name, logging.WARNING)
    if "--verbose" in argv or "-v" in argv:
        log_level = logging.DEBUG

    return Settings(
        map_path=resolve_map(map_arg),
        speed=speed,
        log_level=log_level,
        step="--step" in argv,
    )


def configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
