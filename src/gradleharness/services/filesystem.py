"""Filesystem helpers for gradleharness."""

import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console

from gradleharness.constants import TEMP_ROOT_NAME


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def set_permissions(self, path: str, mode: int):
        if sys.platform == "win32":
            return

        try:
            os.chmod(path, mode)
        except Exception as exc:
            self.logger.warning("Could not set permissions on %s: %s", path, exc)

    def ensure_dir(self, path: str):
        os.makedirs(path, exist_ok=True)

    def cleanup_dir(self, path: str):
        if os.path.exists(path):
            try:
                shutil.rmtree(path)
                self.logger.debug("Removed directory: %s", path)
            except Exception as exc:
                message = f"Warning: Could not remove {path}: {exc}"
                self.console.print(f"[yellow]{message}[/yellow]")
                self.logger.warning(message)


class TempRoot:
    """Process-wide parent directory for test workspaces.

    The first ``ensure()`` wipes whatever a previous run left behind and
    recreates the directory empty. Later calls return the same path without
    touching the disk until ``reset()`` is called. Only safe when a single
    process owns the directory.
    """

    def __init__(
        self,
        filesystem_service: FileSystemService,
        base_dir: Optional[str] = None,
        name: str = TEMP_ROOT_NAME,
    ):
        self.filesystem_service = filesystem_service
        self.base_dir = base_dir
        self.name = name
        self._path: Optional[Path] = None

    @property
    def initialized(self) -> bool:
        return self._path is not None

    def ensure(self) -> Path:
        if self._path is not None:
            return self._path

        path = Path(self.base_dir or tempfile.gettempdir()) / self.name
        self.filesystem_service.cleanup_dir(str(path))
        self.filesystem_service.ensure_dir(str(path))
        self._path = path
        return path

    def reset(self):
        self._path = None
