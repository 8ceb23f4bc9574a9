"""TOML config loading for srcmgr.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "srcmgr.toml"
_COLOR_MODES = ("auto", "always", "never")


@dataclass
class IncludeConfig:
    directories: list[str] = field(default_factory=list)


@dataclass
class DiagnosticsConfig:
    color: str = "auto"
    program_name: str = ""
    show_kind_label: bool = True


@dataclass
class SrcmgrConfig:
    includes: IncludeConfig = field(default_factory=IncludeConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find srcmgr.toml. Raises FileNotFoundError."""
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


def load_config(path: Path) -> SrcmgrConfig:
    """Parse a srcmgr.toml file into a SrcmgrConfig.

    Relative include directories are resolved against the config file's
    directory.
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = SrcmgrConfig()

    if "includes" in data:
        inc = data["includes"]
        base = path.parent
        config.includes = IncludeConfig(
            directories=[str(base / d) for d in inc.get("directories", [])],
        )

    if "diagnostics" in data:
        diag = data["diagnostics"]
        color = diag.get("color", "auto")
        if color not in _COLOR_MODES:
            raise ValueError(
                f"invalid color mode {color!r} in {path} (expected one of {', '.join(_COLOR_MODES)})"
            )
        config.diagnostics = DiagnosticsConfig(
            color=color,
            program_name=diag.get("program_name", ""),
            show_kind_label=diag.get("show_kind_label", True),
        )

    return config
