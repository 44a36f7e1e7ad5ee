"""Load dcatgraph settings from TOML (e.g. dcatgraph.toml).

Config file is looked up in order:
  1. Path in DCATGRAPH_CONFIG env var (if set)
  2. dcatgraph.toml in the current working directory

Values are read from the [dcatgraph] table. If no file is found, built-in
defaults are used.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

CONFIG_ENV_VAR = "DCATGRAPH_CONFIG"
CONFIG_FILE_NAME = "dcatgraph.toml"


class GraphSettings(BaseModel, frozen=True):
    """Run-wide settings for ingestion and rectification."""

    default_language: str = Field(
        default="fr",
        description="Language given to untagged titles, descriptions and names. Empty disables the pass.",
    )
    page_directory: Path = Field(
        default=Path("json"),
        description="Directory holding the cached export pages.",
    )
    page_file_pattern: str = Field(
        default="export{page}.json",
        description="File name of a cached page; {page} is replaced by the page number.",
    )
    first_page: int = Field(default=1, ge=1)
    last_page: int = Field(
        default=0,
        ge=0,
        description="Last page to read; 0 means learn it from the paged collection.",
    )
    max_pages: int = Field(
        default=10000,
        ge=1,
        description="Upper bound on pages read in one run when the last page is unknown.",
    )
    log_level: str = Field(default="INFO")


def _default_config_paths() -> list[Path]:
    """Return paths to check for dcatgraph.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path.cwd() / CONFIG_FILE_NAME)
    return paths


def _read_table(path: Path) -> dict[str, Any] | None:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None
    table = data.get("dcatgraph", {})
    return table if isinstance(table, dict) else {}


def load_settings(path: Path | str | None = None) -> GraphSettings:
    """Load settings from `path`, or from the first default location found.

    An explicit path that cannot be read is an error; default locations that
    are missing or unreadable are skipped.
    """
    if path is not None:
        path = Path(path)
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return GraphSettings(**data.get("dcatgraph", {}))
    for candidate in _default_config_paths():
        if candidate.is_file():
            table = _read_table(candidate)
            if table is not None:
                return GraphSettings(**table)
    return GraphSettings()
