"""Gradle distribution archive unpacking."""

import os
import shutil
import stat
import zipfile
from pathlib import Path
from typing import List, Tuple

from gradleharness.errors import ToolExecutionError


class ArchiveService:
    """Unpacks distribution zips, keeping launcher permissions intact."""

    def __init__(self, filesystem_service):
        self.filesystem_service = filesystem_service

    def is_within_dir(self, base_dir: Path, candidate: Path) -> bool:
        try:
            return os.path.commonpath([str(base_dir), str(candidate)]) == str(base_dir)
        except ValueError:
            return False

    def extract_distribution(self, zip_path: str, destination_dir: str) -> Path:
        """Extracts ``zip_path`` and returns the distribution home, e.g. ``<dest>/gradle-1.9``."""
        base = Path(destination_dir).resolve()

        try:
            with zipfile.ZipFile(zip_path, "r") as zip_ref:
                home_name, entries = self._plan_entries(base, zip_ref.infolist(), zip_path)
                for member, target_path in entries:
                    if member.is_dir():
                        target_path.mkdir(parents=True, exist_ok=True)
                        continue

                    target_path.parent.mkdir(parents=True, exist_ok=True)
                    with zip_ref.open(member, "r") as src, open(target_path, "wb") as dst:
                        shutil.copyfileobj(src, dst)

                    # Unix mode bits live in the high word; archives built on Windows carry none.
                    mode = stat.S_IMODE(member.external_attr >> 16)
                    if mode:
                        self.filesystem_service.set_permissions(str(target_path), mode)
        except zipfile.BadZipFile as exc:
            raise ToolExecutionError(f"Invalid distribution archive: {zip_path}") from exc

        return base / home_name

    def _plan_entries(
        self,
        base: Path,
        members: List[zipfile.ZipInfo],
        zip_path: str,
    ) -> Tuple[str, List[Tuple[zipfile.ZipInfo, Path]]]:
        top_level = set()
        entries = []

        for member in members:
            name = member.filename.replace("\\", "/")
            target_path = (base / name).resolve()
            if not self.is_within_dir(base, target_path) or target_path == base:
                raise ToolExecutionError(
                    f"Distribution entry `{member.filename}` points outside the install directory."
                )
            if stat.S_ISLNK(member.external_attr >> 16):
                raise ToolExecutionError(f"Distribution entry `{member.filename}` is a symbolic link.")

            top_level.add(name.split("/", 1)[0])
            entries.append((member, target_path))

        if len(top_level) != 1:
            found = ", ".join(sorted(top_level)) or "<empty archive>"
            raise ToolExecutionError(
                f"Distribution archive {zip_path} must hold a single gradle-<version>/ directory, "
                f"found: {found}"
            )

        return top_level.pop(), entries
