import re
from pathlib import Path

import pytest

from gradleharness.core import ModelBuilderHarness
from gradleharness.errors import ToolExecutionError
from gradleharness.models import ModelSnapshot

RESOURCES = Path(__file__).parent / "resources"


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None

    def error(self, *_args, **_kwargs):
        return None


class FakeExecuter:
    def __init__(self, connection, action):
        self.connection = connection
        self.import_action = action
        self.arguments = []

    def with_arguments(self, *arguments):
        self.arguments = list(arguments)
        return self

    def run(self):
        gradle = self.connection.gradle
        connector = self.connection.connector
        gradle.executers.append(self)

        if connector.version in gradle.failing_versions:
            raise ToolExecutionError(f"Gradle {connector.version} daemon failed to start")

        gradle.seen_workspaces.append(sorted(path.name for path in connector.project_dir.iterdir()))
        if gradle.return_none:
            return None

        models = {
            name: {"name": connector.project_dir.name} for name in self.import_action.expected_model_names()
        }
        return ModelSnapshot(models, gradle_version=connector.version)


class FakeConnection:
    def __init__(self, gradle, connector, scratch_dir):
        self.gradle = gradle
        self.connector = connector
        self.scratch_dir = scratch_dir
        self.closed = False

    def action(self, import_action):
        return FakeExecuter(self, import_action)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class FakeConnector:
    URI_VERSION = re.compile(r"gradle-(.+)-bin\.zip$")

    def __init__(self, gradle):
        self.gradle = gradle
        self.distribution_uri = None
        self.gradle_version = None
        self.project_dir = None
        self.daemon_idle_seconds = None

    @property
    def version(self):
        if self.gradle_version:
            return self.gradle_version
        return self.URI_VERSION.search(self.distribution_uri).group(1)

    def use_distribution(self, uri):
        self.distribution_uri = uri
        return self

    def use_gradle_version(self, gradle_version):
        self.gradle_version = gradle_version
        return self

    def for_project_directory(self, project_dir):
        self.project_dir = Path(project_dir)
        return self

    def daemon_max_idle_time(self, seconds):
        self.daemon_idle_seconds = seconds
        return self

    def connect(self):
        if self.version in self.gradle.unreachable_versions:
            raise ToolExecutionError(f"Could not connect to Gradle {self.version}")
        scratch_dir = self.gradle.scratch_root / f"connection-{len(self.gradle.connections)}"
        scratch_dir.mkdir(parents=True)
        connection = FakeConnection(self.gradle, self, scratch_dir)
        self.gradle.connectors.append(self)
        self.gradle.connections.append(connection)
        return connection


class FakeGradle:
    """Stands in for the Gradle client API and records every connection."""

    def __init__(self, scratch_root: Path):
        self.scratch_root = scratch_root
        self.connectors = []
        self.connections = []
        self.executers = []
        self.seen_workspaces = []
        self.failing_versions = set()
        self.unreachable_versions = set()
        self.return_none = False

    def connector(self):
        return FakeConnector(self)


@pytest.fixture
def dummy_logger():
    return DummyLogger()


@pytest.fixture
def fixtures_root():
    return RESOURCES


@pytest.fixture
def fake_gradle(tmp_path):
    return FakeGradle(tmp_path / "scratch")


@pytest.fixture
def harness_factory(tmp_path, fake_gradle):
    def build(**kwargs):
        kwargs.setdefault("fixtures_root", str(RESOURCES))
        kwargs.setdefault("temp_dir", str(tmp_path / "tmp"))
        kwargs.setdefault("distributions_dir", str(tmp_path / "dists"))
        kwargs.setdefault("connector_factory", fake_gradle.connector)
        kwargs.setdefault("environ", {})
        return ModelBuilderHarness(**kwargs)

    return build
