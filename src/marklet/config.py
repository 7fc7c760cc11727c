"""Parser options and TOML config loading."""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "marklet.toml"
DEFAULT_MAX_DEPTH = 128

# Python frames spent per nested block, plus headroom for the caller's stack
_FRAMES_PER_BLOCK = 5
_FRAME_HEADROOM = 100


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Knobs for a single parse call."""

    max_depth: int = DEFAULT_MAX_DEPTH
    recover: bool = True


def depth_ceiling() -> int:
    """Deepest block nesting the parser can reach without a RecursionError."""
    return max(1, (sys.getrecursionlimit() - _FRAME_HEADROOM) // _FRAMES_PER_BLOCK)


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def options_from_config(config: dict[str, Any]) -> ParserOptions:
    """Build ParserOptions from the ``[parser]`` table; bad values are ignored."""
    table = config.get("parser")
    if not isinstance(table, dict):
        return ParserOptions()

    max_depth = DEFAULT_MAX_DEPTH
    cfg_depth = table.get("max_depth")
    # bool is an int subclass
    if isinstance(cfg_depth, int) and not isinstance(cfg_depth, bool) and cfg_depth > 0:
        max_depth = min(cfg_depth, depth_ceiling())

    recover = True
    cfg_recover = table.get("recover")
    if isinstance(cfg_recover, bool):
        recover = cfg_recover

    return ParserOptions(max_depth=max_depth, recover=recover)


def load_options(config_path: Path | None, search_dir: Path) -> ParserOptions:
    """Load ParserOptions from an explicit path or ``marklet.toml`` in search_dir."""
    return options_from_config(load_config(config_path, search_dir))
