import pytest

from gradleharness.errors import HarnessContractError, HarnessError
from gradleharness.models import Workspace
from gradleharness.services.session import ToolSessionService


@pytest.fixture
def workspace(tmp_path):
    path = tmp_path / "test_external_project"
    path.mkdir()
    (path / "build.gradle").write_text("", encoding="utf-8")
    (path / "settings.gradle").write_text("", encoding="utf-8")
    return Workspace(name="test_external_project", path=path)


def test_session_without_uri_requests_version_by_name(fake_gradle, dummy_logger, workspace):
    service = ToolSessionService(connector_factory=fake_gradle.connector, logger=dummy_logger)

    snapshot = service.run(workspace, "1.9", None, ["ExternalProject"])

    connector = fake_gradle.connectors[0]
    assert connector.gradle_version == "1.9"
    assert connector.distribution_uri is None
    assert connector.daemon_idle_seconds == 1
    assert snapshot.model_names == ["ExternalProject"]


def test_on_connected_fires_only_after_connection_opens(fake_gradle, dummy_logger, workspace):
    service = ToolSessionService(connector_factory=fake_gradle.connector, logger=dummy_logger)
    connected = []

    service.run(workspace, "1.9", None, ["ExternalProject"], on_connected=lambda: connected.append("1.9"))

    fake_gradle.unreachable_versions.add("1.10")
    with pytest.raises(HarnessError, match="Could not connect"):
        service.run(workspace, "1.10", None, ["ExternalProject"], on_connected=lambda: connected.append("1.10"))

    assert connected == ["1.9"]


def test_session_with_uri_uses_distribution(fake_gradle, dummy_logger, workspace):
    service = ToolSessionService(connector_factory=fake_gradle.connector, logger=dummy_logger)
    uri = "https://mirror.example.com/distributions/gradle-1.10-bin.zip"

    snapshot = service.run(workspace, "1.10", uri, ["ExternalProject"])

    connector = fake_gradle.connectors[0]
    assert connector.distribution_uri == uri
    assert connector.gradle_version is None
    assert snapshot.gradle_version == "1.10"


def test_session_closes_connection_when_action_fails(fake_gradle, dummy_logger, workspace):
    fake_gradle.failing_versions.add("1.9")
    service = ToolSessionService(connector_factory=fake_gradle.connector, logger=dummy_logger)

    with pytest.raises(HarnessError):
        service.run(workspace, "1.9", None, ["ExternalProject"])

    assert fake_gradle.connections[0].closed is True


def test_missing_init_script_is_a_contract_violation(fake_gradle, dummy_logger, workspace):
    service = ToolSessionService(
        connector_factory=fake_gradle.connector,
        logger=dummy_logger,
        init_script_generator=lambda _directory: None,
    )

    with pytest.raises(HarnessContractError, match="Init script"):
        service.run(workspace, "1.9", None, ["ExternalProject"])

    assert fake_gradle.executers == []
    assert fake_gradle.connections[0].closed is True


def test_unknown_model_is_rejected_before_connecting(fake_gradle, dummy_logger, workspace):
    service = ToolSessionService(connector_factory=fake_gradle.connector, logger=dummy_logger)

    with pytest.raises(HarnessError, match="Unknown model 'IdeaProject'"):
        service.run(workspace, "1.9", None, ["IdeaProject"])

    assert fake_gradle.connectors == []
