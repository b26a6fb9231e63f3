"""Client connection to a Gradle distribution for running import actions."""

import json
import tempfile
import uuid
from importlib import resources
from pathlib import Path
from typing import List, Optional

from gradleharness.constants import (
    GRADLE_RELEASE_REPOSITORY,
    GRADLE_SNAPSHOT_REPOSITORY,
    IMPORT_REQUEST_PROPERTY,
    IMPORT_RESULT_PROPERTY,
    IMPORT_TASK,
)
from gradleharness.errors import ConfigurationError, HarnessError, ToolExecutionError
from gradleharness.errors_catalog import actionable_error
from gradleharness.models import ImportAction, ModelSnapshot
from gradleharness.services.distribution import DistributionLocator, GradleVersion, validate_uri

INIT_SCRIPT_RESOURCE = "resources/model_import.gradle"


def generate_init_script(directory) -> Path:
    """Writes a fresh copy of the model import init script into ``directory``."""
    template = resources.files("gradleharness").joinpath(INIT_SCRIPT_RESOURCE)
    script = Path(directory) / f"gradleharness-init-{uuid.uuid4().hex[:8]}.gradle"
    script.write_text(template.read_text(encoding="utf-8"), encoding="utf-8")
    return script


class BuildActionExecuter:
    """Runs one import action synchronously against a connected project."""

    def __init__(self, connection: "ProjectConnection", action: ImportAction):
        self.connection = connection
        self.import_action = action
        self.arguments: List[str] = []

    def with_arguments(self, *arguments: str) -> "BuildActionExecuter":
        self.arguments = [str(argument) for argument in arguments]
        return self

    def build_command(self, request_path: Path, result_path: Path) -> List[str]:
        connection = self.connection
        return [
            str(connection.executable),
            *self.arguments,
            "--daemon",
            f"-Dorg.gradle.daemon.idletimeout={int(connection.daemon_idle_seconds * 1000)}",
            "--project-dir",
            str(connection.project_dir),
            f"-P{IMPORT_REQUEST_PROPERTY}={request_path}",
            f"-P{IMPORT_RESULT_PROPERTY}={result_path}",
            "--quiet",
            IMPORT_TASK,
        ]

    def run(self) -> ModelSnapshot:
        connection = self.connection
        connection.ensure_open()

        request_path = connection.scratch_dir / "import-request.json"
        result_path = connection.scratch_dir / "import-result.json"
        request_path.write_text(json.dumps(self.import_action.to_request(), indent=2), encoding="utf-8")
        if result_path.exists():
            result_path.unlink()

        try:
            connection.command_runner.run(
                self.build_command(request_path, result_path),
                check=True,
                capture_output=True,
                cwd=str(connection.project_dir),
            )
        except ToolExecutionError as exc:
            message = actionable_error("import_action_failed", version=connection.version_label)
            raise ToolExecutionError(f"{message}\n{exc}") from exc

        if not result_path.is_file():
            raise ToolExecutionError(
                f"Gradle finished without writing the import result to {result_path}."
            )

        try:
            data = json.loads(result_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ToolExecutionError(f"Could not read import result '{result_path}': {exc}") from exc

        return ModelSnapshot.from_result(data)


class ProjectConnection:
    """Live handle to a Gradle distribution bound to one project directory."""

    def __init__(
        self,
        executable: Path,
        project_dir: Path,
        scratch_dir: Path,
        daemon_idle_seconds: float,
        version_label: str,
        command_runner,
        filesystem_service,
        logger,
    ):
        self.executable = executable
        self.project_dir = project_dir
        self.scratch_dir = scratch_dir
        self.daemon_idle_seconds = daemon_idle_seconds
        self.version_label = version_label
        self.command_runner = command_runner
        self.filesystem_service = filesystem_service
        self.logger = logger
        self.closed = False

    def action(self, import_action: ImportAction) -> BuildActionExecuter:
        self.ensure_open()
        return BuildActionExecuter(self, import_action)

    def ensure_open(self):
        if self.closed:
            raise HarnessError(f"Connection to {self.project_dir} is already closed.")

    def close(self):
        if self.closed:
            return
        self.closed = True
        self.filesystem_service.cleanup_dir(str(self.scratch_dir))
        self.logger.debug("Closed connection to %s", self.project_dir)

    def __enter__(self) -> "ProjectConnection":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class GradleConnector:
    """Builder for project connections, by explicit distribution URI or by version name."""

    def __init__(
        self,
        download_service,
        command_runner,
        filesystem_service,
        logger,
        release_repository: str = GRADLE_RELEASE_REPOSITORY,
        snapshot_repository: str = GRADLE_SNAPSHOT_REPOSITORY,
    ):
        self.download_service = download_service
        self.command_runner = command_runner
        self.filesystem_service = filesystem_service
        self.logger = logger
        self.default_locator = DistributionLocator(release_repository, snapshot_repository)
        self.distribution_uri: Optional[str] = None
        self.gradle_version: Optional[str] = None
        self.project_dir: Optional[Path] = None
        self.daemon_idle_seconds: float = 3 * 60 * 60

    def use_distribution(self, uri: str) -> "GradleConnector":
        self.distribution_uri = validate_uri(uri)
        self.gradle_version = None
        return self

    def use_gradle_version(self, gradle_version: str) -> "GradleConnector":
        self.gradle_version = GradleVersion.version(gradle_version).get_version()
        self.distribution_uri = None
        return self

    def for_project_directory(self, project_dir) -> "GradleConnector":
        self.project_dir = Path(project_dir)
        return self

    def daemon_max_idle_time(self, seconds: float) -> "GradleConnector":
        if seconds <= 0:
            raise ConfigurationError("Daemon idle time must be positive.")
        self.daemon_idle_seconds = seconds
        return self

    def resolve_distribution_uri(self) -> str:
        if self.distribution_uri:
            return self.distribution_uri
        if self.gradle_version:
            return self.default_locator.get_distribution_for(GradleVersion.version(self.gradle_version))
        raise ConfigurationError("No Gradle distribution selected. Use a distribution URI or version.")

    def connect(self) -> ProjectConnection:
        if self.project_dir is None:
            raise ConfigurationError("No project directory selected for the Gradle connection.")
        if not self.project_dir.is_dir():
            raise ConfigurationError(f"Project directory does not exist: {self.project_dir}")

        uri = self.resolve_distribution_uri()
        self.logger.info("Connecting to %s using %s", self.project_dir, uri)
        executable = self.download_service.install_distribution(uri)

        scratch_dir = Path(tempfile.mkdtemp(prefix="gradleharness-"))
        return ProjectConnection(
            executable=executable,
            project_dir=self.project_dir,
            scratch_dir=scratch_dir,
            daemon_idle_seconds=self.daemon_idle_seconds,
            version_label=self.gradle_version or uri,
            command_runner=self.command_runner,
            filesystem_service=self.filesystem_service,
            logger=self.logger,
        )
