"""TOML config loading for gotoc.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "gotoc.toml"


@dataclass
class EmitConfig:
    indent_width: int = 4


@dataclass
class DiagnosticsConfig:
    color: bool = True


@dataclass
class GotocConfig:
    emit: EmitConfig = field(default_factory=EmitConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find gotoc.toml. Raises FileNotFoundError."""
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


def load_config(path: Path) -> GotocConfig:
    """Parse a gotoc.toml file into a GotocConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = GotocConfig()

    if "emit" in data:
        emt = data["emit"]
        indent_width = emt.get("indent_width", 4)
        if not isinstance(indent_width, int) or isinstance(indent_width, bool) or indent_width < 0:
            raise ValueError(f"{path}: emit.indent_width must be a non-negative integer")
        config.emit = EmitConfig(indent_width=indent_width)

    if "diagnostics" in data:
        dgn = data["diagnostics"]
        config.diagnostics = DiagnosticsConfig(
            color=bool(dgn.get("color", True)),
        )

    return config
