"""Runs an import action for one workspace and Gradle version."""

from typing import Callable, Iterable, Optional

from gradleharness.constants import DAEMON_MAX_IDLE_SECONDS, INIT_SCRIPT_CMD_OPTION
from gradleharness.errors import HarnessContractError
from gradleharness.models import ImportAction, ModelSnapshot, Workspace
from gradleharness.services.connector import generate_init_script


class ToolSessionService:
    """Connects to Gradle, submits the import action and always closes the connection."""

    def __init__(
        self,
        connector_factory: Callable,
        logger,
        daemon_idle_seconds: float = DAEMON_MAX_IDLE_SECONDS,
        include_default_models: bool = False,
        init_script_generator: Callable = generate_init_script,
    ):
        self.connector_factory = connector_factory
        self.logger = logger
        self.daemon_idle_seconds = daemon_idle_seconds
        self.include_default_models = include_default_models
        self.init_script_generator = init_script_generator

    def open_connection(self, workspace: Workspace, gradle_version: str, distribution_uri: Optional[str]):
        connector = self.connector_factory()
        if distribution_uri is None:
            self.logger.debug("No repository mirror configured, resolving Gradle %s by name", gradle_version)
            connector.use_gradle_version(gradle_version)
        else:
            connector.use_distribution(distribution_uri)
        connector.for_project_directory(workspace.path)
        connector.daemon_max_idle_time(self.daemon_idle_seconds)
        return connector.connect()

    def run(
        self,
        workspace: Workspace,
        gradle_version: str,
        distribution_uri: Optional[str],
        requested_models: Iterable,
        on_connected: Optional[Callable[[], None]] = None,
    ) -> ModelSnapshot:
        import_action = ImportAction(include_default_models=self.include_default_models)
        import_action.add_extra_project_model_classes(requested_models)

        with self.open_connection(workspace, gradle_version, distribution_uri) as connection:
            if on_connected is not None:
                on_connected()
            executer = connection.action(import_action)
            init_script = self.init_script_generator(connection.scratch_dir)
            if init_script is None:
                raise HarnessContractError("Init script was not generated.")
            executer.with_arguments(INIT_SCRIPT_CMD_OPTION, str(init_script.resolve()))
            snapshot = executer.run()

        if snapshot is None:
            raise HarnessContractError(f"Gradle {gradle_version} returned no model snapshot.")
        return snapshot
