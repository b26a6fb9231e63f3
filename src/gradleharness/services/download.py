"""Distribution download and installation with progress reporting."""

import os
import shutil
import sys
import time
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from gradleharness.errors import ToolExecutionError
from gradleharness.errors_catalog import actionable_error


class DownloadService:
    """Fetches Gradle distributions into a local cache and unpacks them."""

    INSTALLED_MARKER = ".installed"

    def __init__(
        self,
        archive_service,
        filesystem_service,
        logger,
        console,
        requests_module,
        distributions_dir: str,
        timeout: float = 60.0,
        retry_count: int = 0,
        retry_backoff_seconds: float = 2.0,
    ):
        self.archive_service = archive_service
        self.filesystem_service = filesystem_service
        self.logger = logger
        self.console = console
        self.requests = requests_module
        self.distributions_dir = distributions_dir
        self.timeout = timeout
        self.retry_count = retry_count
        self.retry_backoff_seconds = retry_backoff_seconds

    def download_file(self, url: str, dest_path: str, description: str = "Downloading..."):
        self.logger.info("Downloading %s to %s", url, dest_path)
        max_attempts = max(1, self.retry_count + 1)

        for attempt in range(1, max_attempts + 1):
            try:
                self._stream_to_file(url, dest_path, description)
                return
            except self.requests.RequestException as exc:
                if attempt < max_attempts:
                    self.logger.warning(
                        "Download failed on attempt %s/%s. Retrying in %.1fs: %s",
                        attempt,
                        max_attempts,
                        self.retry_backoff_seconds,
                        exc,
                    )
                    time.sleep(self.retry_backoff_seconds)
                    continue
                raise ToolExecutionError(f"Download failed for {description}: {exc}") from exc

    def _stream_to_file(self, url: str, dest_path: str, description: str):
        with self.requests.get(url, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            total_size = int(response.headers.get("Content-Length", 0))

            os.makedirs(os.path.dirname(dest_path), exist_ok=True)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                "•",
                TimeElapsedColumn(),
                console=self.console,
            ) as progress:
                task = progress.add_task(f"[cyan]{description}", total=total_size or None)
                with open(dest_path, "wb") as file_obj:
                    for chunk in response.iter_content(chunk_size=8192):
                        if not chunk:
                            continue
                        file_obj.write(chunk)
                        progress.update(task, advance=len(chunk))

    def fetch_archive(self, uri: str, dest_path: str):
        parsed = urlparse(uri)
        if parsed.scheme.lower() != "file":
            self.download_file(uri, dest_path, f"Downloading {os.path.basename(dest_path)}...")
            return

        local_path = url2pathname(parsed.path)
        if not os.path.isfile(local_path):
            raise ToolExecutionError(f"Distribution archive not found: {local_path}")
        self.logger.info("Copying %s to %s", local_path, dest_path)
        shutil.copyfile(local_path, dest_path)

    def install_distribution(self, uri: str) -> Path:
        """Returns the Gradle launcher of the distribution at ``uri``, fetching it if needed."""
        archive_name = os.path.basename(urlparse(uri).path)
        install_dir = Path(self.distributions_dir) / Path(archive_name).stem
        marker = install_dir / self.INSTALLED_MARKER

        if marker.is_file():
            self.logger.debug("Reusing installed distribution %s", install_dir)
            return self.locate_executable(install_dir / marker.read_text(encoding="utf-8").strip())

        self.filesystem_service.cleanup_dir(str(install_dir))
        self.filesystem_service.ensure_dir(str(install_dir))

        archive_path = install_dir / archive_name
        self.fetch_archive(uri, str(archive_path))
        distribution_home = self.archive_service.extract_distribution(str(archive_path), str(install_dir))
        archive_path.unlink()

        executable = self.locate_executable(distribution_home)
        marker.write_text(distribution_home.name, encoding="utf-8")
        self.console.print(f"[green]Installed {archive_name}.[/green]")
        return executable

    def locate_executable(self, distribution_home: Path) -> Path:
        launcher = "gradle.bat" if sys.platform == "win32" else "gradle"
        executable = distribution_home / "bin" / launcher
        if not executable.is_file():
            raise ToolExecutionError(
                actionable_error("gradle_executable_not_found", path=str(distribution_home))
            )
        return executable
