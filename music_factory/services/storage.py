"""Data-directory file access for analyses, packs and notes."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

DEFAULT_DATA_PATH = "data"
ANALYSIS_DIR = "analysis"
OUTPUTS_DIR = "outputs"
NOTES_DIR = "notes"


def extract_slug(path: str | Path) -> str:
    """``analysis/yorushika_tadakiminihare.yaml`` -> ``yorushika_tadakiminihare``."""
    return Path(path).stem


class PathOutsideDataDirError(ValueError):
    """A requested path resolves outside the data directory."""


class DataStore:
    """Reads and writes text under one root directory.

    Every path, relative or absolute, must resolve inside the root.
    """

    def __init__(self, root: str | Path | None = None):
        self.root = Path(
            root
            or os.environ.get("MUSIC_FACTORY_DATA_PATH")
            or os.environ.get("DATA_PATH")
            or DEFAULT_DATA_PATH
        )

    def resolve(self, *parts: str | Path) -> Path:
        full = self.root.joinpath(*parts)
        if not full.resolve().is_relative_to(self.root.resolve()):
            raise PathOutsideDataDirError(f"Path is outside the data directory: {Path(*parts)}")
        return full

    def exists(self, path: str | Path) -> bool:
        return self.resolve(path).is_file()

    def read_text(self, path: str | Path) -> str:
        return self.resolve(path).read_text(encoding="utf-8")

    def write_text(self, path: str | Path, content: str) -> Path:
        full = self.resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(content, encoding="utf-8")
        log.info("Wrote %s (%d chars)", full, len(content))
        return full

    def write_yaml(self, path: str | Path, data: Any) -> Path:
        content = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
        return self.write_text(path, content)
