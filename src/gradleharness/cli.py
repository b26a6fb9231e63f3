import logging
import os

import click
from rich.logging import RichHandler
from rich.table import Table

from .constants import KNOWN_MODELS
from .core import ModelBuilderHarness, console
from .errors import HarnessError
from .services.config_loader import ConfigLoader
from .services.report import ReportService


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


def _render_results(test_name, results):
    table = Table(title=f"Model import: {test_name}")
    table.add_column("Gradle version")
    table.add_column("Status")
    table.add_column("Models")
    table.add_column("Error", overflow="fold")

    for result in results:
        if result.passed:
            table.add_row(result.version, "[green]passed[/green]", ", ".join(result.snapshot.model_names), "")
        else:
            table.add_row(result.version, "[red]failed[/red]", "", str(result.error))
    console.print(table)


@click.command()
@click.option("--test-name", required=False, help="Fixture test name (directory under the fixtures root).")
@click.option(
    "--model",
    "models",
    multiple=True,
    type=click.Choice(KNOWN_MODELS),
    help="Model to request from the import action. Repeat for several models.",
)
@click.option(
    "--gradle-version",
    "versions",
    multiple=True,
    help="Gradle version to run against. Repeat for several versions (default: supported versions).",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .gradleharness.yml if present.",
)
@click.option("--fixtures-root", required=False, type=click.Path(), help="Directory holding test fixtures.")
@click.option("--temp-root", required=False, type=click.Path(), help="Parent directory for workspaces.")
@click.option(
    "--distributions-dir",
    required=False,
    type=click.Path(),
    help="Cache directory for downloaded Gradle distributions.",
)
@click.option("--release-repository", required=False, help="Release distributions repository URL.")
@click.option("--snapshot-repository", required=False, help="Snapshot distributions repository URL.")
@click.option(
    "--daemon-idle-seconds",
    required=False,
    type=float,
    default=None,
    help="Idle time before Gradle daemons stop (default: 1).",
)
@click.option(
    "--include-default-models",
    is_flag=True,
    default=None,
    help="Also build the default models alongside the requested ones.",
)
@click.option("--download-timeout", required=False, type=float, default=None, help="HTTP download timeout in seconds.")
@click.option(
    "--retry-count",
    required=False,
    type=int,
    default=None,
    help="Opt-in retries for failed downloads. Defaults to 0 (no retry).",
)
@click.option(
    "--retry-backoff-seconds",
    required=False,
    type=float,
    default=None,
    help="Backoff time in seconds between download retries.",
)
@click.option("--report-file", required=False, type=click.Path(), help="Write a JSON run report to this path.")
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(
    test_name,
    models,
    versions,
    config,
    fixtures_root,
    temp_root,
    distributions_dir,
    release_repository,
    snapshot_repository,
    daemon_idle_seconds,
    include_default_models,
    download_timeout,
    retry_count,
    retry_backoff_seconds,
    report_file,
    verbose,
    log_file,
):
    """Import a fixture project with several Gradle versions and check the returned models."""
    logger = logging.getLogger("gradleharness")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".gradleharness.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except HarnessError as exc:
        raise click.ClickException(str(exc)) from exc

    test_name = _resolve_option(test_name, config_values, "test_name")
    models = list(models) or config_values.get("models", [])
    versions = list(versions) or config_values.get("versions", list(ModelBuilderHarness.VALID_VERSIONS))
    fixtures_root = _resolve_option(fixtures_root, config_values, "fixtures_root", default="fixtures")
    temp_root = _resolve_option(temp_root, config_values, "temp_root")
    distributions_dir = _resolve_option(distributions_dir, config_values, "distributions_dir")
    release_repository = _resolve_option(release_repository, config_values, "release_repository")
    snapshot_repository = _resolve_option(snapshot_repository, config_values, "snapshot_repository")
    daemon_idle_seconds = float(
        _resolve_option(daemon_idle_seconds, config_values, "daemon_idle_seconds", default=1.0)
    )
    include_default_models = bool(
        _resolve_option(include_default_models, config_values, "include_default_models", default=False)
    )
    download_timeout = float(
        _resolve_option(download_timeout, config_values, "download_timeout", default=60.0)
    )
    retry_count = int(_resolve_option(retry_count, config_values, "retry_count", default=0))
    retry_backoff_seconds = float(
        _resolve_option(retry_backoff_seconds, config_values, "retry_backoff_seconds", default=2.0)
    )
    report_file = _resolve_option(report_file, config_values, "report_file")
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")

    if not test_name:
        raise click.ClickException("Missing required option '--test-name' (or provide it in config).")
    if not models:
        raise click.ClickException("Missing required option '--model' (or provide it in config).")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        harness = ModelBuilderHarness(
            fixtures_root=fixtures_root,
            temp_dir=temp_root,
            distributions_dir=distributions_dir,
            release_repository=release_repository,
            snapshot_repository=snapshot_repository,
            daemon_idle_seconds=daemon_idle_seconds,
            include_default_models=include_default_models,
            download_timeout=download_timeout,
            retry_count=retry_count,
            retry_backoff_seconds=retry_backoff_seconds,
        )
    except HarnessError as exc:
        raise click.ClickException(str(exc)) from exc

    report = ReportService(report_file, logger) if report_file else None
    if report:
        report.start_run(test_name, models)

    results = harness.run_versions(test_name, models, versions)

    if report:
        for result in results:
            report.add_result(
                result.version,
                result.passed,
                models=result.snapshot.model_names if result.snapshot else None,
                error=str(result.error) if result.error else None,
            )
        report.finalize()

    _render_results(test_name, results)
    raise SystemExit(0 if all(result.passed for result in results) else 1)


if __name__ == "__main__":
    main()
