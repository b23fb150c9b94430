"""TOML config loading for roadrunner.toml."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from roadrunner.evaluator import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

CONFIG_NAME = "roadrunner.toml"


@dataclass
class InterpreterConfig:
    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass
class ReplConfig:
    prompt: str = ">> "
    color: bool = True


@dataclass
class RoadrunnerConfig:
    interpreter: InterpreterConfig = field(default_factory=InterpreterConfig)
    repl: ReplConfig = field(default_factory=ReplConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find roadrunner.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> RoadrunnerConfig:
    """Parse a roadrunner.toml file into a RoadrunnerConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = RoadrunnerConfig()

    if "interpreter" in data:
        interp = data["interpreter"]
        max_depth = interp.get("max_depth", DEFAULT_MAX_DEPTH)
        if not isinstance(max_depth, int) or max_depth < 1:
            raise ValueError(f"{path}: interpreter.max_depth must be a positive integer")
        config.interpreter = InterpreterConfig(max_depth=max_depth)

    if "repl" in data:
        repl = data["repl"]
        config.repl = ReplConfig(
            prompt=repl.get("prompt", ">> "),
            color=repl.get("color", True),
        )

    logger.debug("loaded config from %s", path)
    return config


def discover_config(start_path: Path | None = None) -> RoadrunnerConfig:
    """Load the nearest roadrunner.toml, or return defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return RoadrunnerConfig()
