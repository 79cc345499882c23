"""Configuration defaults, env vars, and runtime options for speckit-status."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


VERSION = "1.0.0"

DEFAULT_TASKS_FILENAME = "tasks.md"
DEFAULT_SPECS_DIR = "specs"
DEFAULT_PARALLEL_PREVIEW = 6

NEXT_KINDS = ("phase", "task")


@dataclass
class Config:
    """Runtime options, one field per CLI flag."""

    # Input
    spec_folder: str = ""
    specs_dir: str = ""
    tasks_filename: str = ""

    # Output
    json_output: bool = False
    show_all: bool = False
    phase: int | None = None
    next_kind: str = ""
    parallel_preview: int = DEFAULT_PARALLEL_PREVIEW

    # Misc
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.specs_dir:
            self.specs_dir = os.environ.get("SPECKIT_STATUS_SPECS_DIR") or DEFAULT_SPECS_DIR
        if not self.tasks_filename:
            self.tasks_filename = os.environ.get("SPECKIT_STATUS_TASKS_FILE") or DEFAULT_TASKS_FILENAME
        if self.next_kind and self.next_kind not in NEXT_KINDS:
            raise ValueError(f"next_kind must be one of {', '.join(NEXT_KINDS)}")

    def tasks_path(self, folder: Path) -> Path:
        return folder / self.tasks_filename
