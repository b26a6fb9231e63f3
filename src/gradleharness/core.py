import logging
import os
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional

import requests
from rich.console import Console

from .constants import DAEMON_MAX_IDLE_SECONDS, SUPPORTED_VERSIONS
from .errors import HarnessContractError, HarnessError
from .models import ModelSnapshot, VersionRunResult, Workspace
from .services.archive import ArchiveService
from .services.command_runner import CommandRunner
from .services.connector import GradleConnector
from .services.distribution import DistributionLocator, GradleVersion, build_locator
from .services.download import DownloadService
from .services.filesystem import FileSystemService, TempRoot
from .services.session import ToolSessionService
from .services.workspace import WorkspaceProvisioner

console = Console()
logger = logging.getLogger("gradleharness")


class LifecycleState(Enum):
    IDLE = "idle"
    WORKSPACE_READY = "workspace_ready"
    SESSION_ESTABLISHED = "session_established"
    SNAPSHOT_CAPTURED = "snapshot_captured"
    TORN_DOWN = "torn_down"


class ModelImportInvocation:
    """One (test, Gradle version) run: provision, import, capture, tear down."""

    def __init__(self, harness: "ModelBuilderHarness", test_name: str, gradle_version: str, requested_models):
        self.harness = harness
        self.test_name = test_name
        self.gradle_version = gradle_version
        self.requested_models = list(requested_models)
        self.state = LifecycleState.IDLE
        self.history: List[LifecycleState] = []
        self.workspace: Optional[Workspace] = None
        self.all_models: Optional[ModelSnapshot] = None

    def _transition(self, state: LifecycleState):
        logger.debug("%s [%s]: %s -> %s", self.test_name, self.gradle_version, self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def set_up(self) -> ModelSnapshot:
        if self.state is not LifecycleState.IDLE:
            raise HarnessError(f"Invocation of {self.test_name} already ran (state: {self.state.value}).")

        self.workspace = self.harness.workspace_provisioner.provision(self.test_name)
        self._transition(LifecycleState.WORKSPACE_READY)

        distribution_uri = self.harness.resolve_distribution_uri(self.gradle_version)
        snapshot = self.harness.session_service.run(
            self.workspace,
            self.gradle_version,
            distribution_uri,
            self.requested_models,
            on_connected=lambda: self._transition(LifecycleState.SESSION_ESTABLISHED),
        )
        if snapshot is None:
            raise HarnessContractError(f"No model snapshot captured for {self.test_name}.")
        self.all_models = snapshot
        self._transition(LifecycleState.SNAPSHOT_CAPTURED)
        return snapshot

    def tear_down(self):
        if self.workspace is not None:
            self.harness.workspace_provisioner.teardown(self.workspace)
        self._transition(LifecycleState.TORN_DOWN)

    def run(self) -> ModelSnapshot:
        try:
            return self.set_up()
        finally:
            self.tear_down()


class ModelBuilderHarness:
    """Runs model import invocations against a list of Gradle versions."""

    VALID_VERSIONS = list(SUPPORTED_VERSIONS)

    def __init__(
        self,
        fixtures_root: str,
        temp_root: Optional[TempRoot] = None,
        temp_dir: Optional[str] = None,
        distributions_dir: Optional[str] = None,
        release_repository: Optional[str] = None,
        snapshot_repository: Optional[str] = None,
        daemon_idle_seconds: float = DAEMON_MAX_IDLE_SECONDS,
        include_default_models: bool = False,
        download_timeout: float = 60.0,
        retry_count: int = 0,
        retry_backoff_seconds: float = 2.0,
        connector_factory: Optional[Callable] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.filesystem_service = FileSystemService(logger=logger, console=console)
        self.temp_root = temp_root or TempRoot(self.filesystem_service, base_dir=temp_dir)
        self.workspace_provisioner = WorkspaceProvisioner(
            temp_root=self.temp_root,
            fixtures_root=fixtures_root,
            filesystem_service=self.filesystem_service,
            logger=logger,
        )
        self.archive_service = ArchiveService(filesystem_service=self.filesystem_service)
        self.command_runner = CommandRunner(logger=logger)
        self.download_service = DownloadService(
            archive_service=self.archive_service,
            filesystem_service=self.filesystem_service,
            logger=logger,
            console=console,
            requests_module=requests,
            distributions_dir=distributions_dir or self.default_distributions_dir(),
            timeout=download_timeout,
            retry_count=retry_count,
            retry_backoff_seconds=retry_backoff_seconds,
        )
        self.locator: Optional[DistributionLocator] = build_locator(
            release_repository,
            snapshot_repository,
            environ,
        )
        self.session_service = ToolSessionService(
            connector_factory=connector_factory or self.new_connector,
            logger=logger,
            daemon_idle_seconds=daemon_idle_seconds,
            include_default_models=include_default_models,
        )

    @staticmethod
    def default_distributions_dir() -> str:
        return os.path.join(str(Path.home()), ".gradleharness", "dists")

    def new_connector(self) -> GradleConnector:
        return GradleConnector(
            download_service=self.download_service,
            command_runner=self.command_runner,
            filesystem_service=self.filesystem_service,
            logger=logger,
        )

    def resolve_distribution_uri(self, gradle_version: str) -> Optional[str]:
        if self.locator is None:
            return None
        return self.locator.get_distribution_for(GradleVersion.version(gradle_version))

    def invocation(self, test_name: str, gradle_version: str, requested_models) -> ModelImportInvocation:
        return ModelImportInvocation(self, test_name, gradle_version, requested_models)

    def run_test(self, test_name: str, gradle_version: str, requested_models) -> ModelSnapshot:
        logger.info("Running %s with Gradle %s", test_name, gradle_version)
        return self.invocation(test_name, gradle_version, requested_models).run()

    def run_versions(
        self,
        test_name: str,
        requested_models: Iterable,
        versions: Optional[Iterable[str]] = None,
    ) -> List[VersionRunResult]:
        models = list(requested_models)
        results = []
        for gradle_version in versions or self.VALID_VERSIONS:
            try:
                snapshot = self.run_test(test_name, gradle_version, models)
            except (HarnessError, HarnessContractError) as exc:
                logger.error("%s failed with Gradle %s: %s", test_name, gradle_version, exc)
                results.append(VersionRunResult(version=gradle_version, error=exc))
                continue
            except Exception as exc:
                logger.exception("Unexpected error running %s with Gradle %s", test_name, gradle_version)
                results.append(VersionRunResult(version=gradle_version, error=exc))
                continue
            results.append(VersionRunResult(version=gradle_version, snapshot=snapshot))
        return results
