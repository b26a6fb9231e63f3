"""Per-test workspace provisioning for gradleharness."""

from pathlib import Path

from gradleharness.constants import BUILD_SCRIPT_NAME, SETTINGS_FILE_NAME, TEST_METHOD_NAME_PATTERN
from gradleharness.errors import FixtureError
from gradleharness.errors_catalog import actionable_error
from gradleharness.models import Workspace
from gradleharness.services.filesystem import FileSystemService, TempRoot


def workspace_key(test_name: str) -> str:
    match = TEST_METHOD_NAME_PATTERN.fullmatch(test_name)
    if match:
        return match.group(1)
    return test_name


class WorkspaceProvisioner:
    """Creates workspace directories populated from bundled fixture resources."""

    FIXTURE_FILES = (BUILD_SCRIPT_NAME, SETTINGS_FILE_NAME)

    def __init__(self, temp_root: TempRoot, fixtures_root, filesystem_service: FileSystemService, logger):
        self.temp_root = temp_root
        self.fixtures_root = Path(fixtures_root)
        self.filesystem_service = filesystem_service
        self.logger = logger

    def ensure_root(self) -> Path:
        return self.temp_root.ensure()

    def provision(self, test_name: str) -> Workspace:
        key = workspace_key(test_name)
        root = self.ensure_root()

        contents = {file_name: self._load_fixture(key, file_name) for file_name in self.FIXTURE_FILES}

        workspace = Workspace(name=key, path=root / key)
        self.filesystem_service.cleanup_dir(str(workspace.path))
        try:
            self.filesystem_service.ensure_dir(str(workspace.path))
            for file_name, text in contents.items():
                (workspace.path / file_name).write_text(text, encoding="utf-8")
        except OSError as exc:
            self.filesystem_service.cleanup_dir(str(workspace.path))
            raise FixtureError(f"Could not provision workspace '{workspace.path}': {exc}") from exc

        self.logger.debug("Provisioned workspace %s for %s", workspace.path, test_name)
        return workspace

    def teardown(self, workspace: Workspace):
        self.filesystem_service.cleanup_dir(str(workspace.path))

    def _load_fixture(self, key: str, file_name: str) -> str:
        fixture_path = self.fixtures_root / key / file_name
        if not fixture_path.is_file():
            raise FixtureError(
                actionable_error("fixture_not_found", path=str(fixture_path), name=file_name, test=key)
            )

        try:
            return fixture_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FixtureError(f"Could not read fixture '{fixture_path}': {exc}") from exc
