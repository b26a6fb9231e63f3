import pytest

from gradleharness.errors import ConfigurationError
from gradleharness.services.distribution import (
    DistributionLocator,
    GradleVersion,
    build_locator,
    get_repo_url,
)


def test_gradle_version_detects_timestamped_snapshot():
    version = GradleVersion.version("1.12-20140327133732+0000")

    assert version.is_snapshot is True
    assert version.get_version() == "1.12-20140327133732+0000"
    assert str(version.base_version) == "1.12"


@pytest.mark.parametrize("text", ["1.9", "1.10", "1.12-rc-1"])
def test_gradle_version_releases_are_not_snapshots(text):
    assert GradleVersion.version(text).is_snapshot is False


def test_gradle_version_orders_by_base_version():
    assert GradleVersion.version("1.10").base_version > GradleVersion.version("1.9").base_version


def test_gradle_version_rejects_garbage():
    with pytest.raises(ConfigurationError, match="Invalid Gradle version"):
        GradleVersion.version("latest")


def test_locator_uses_release_repository_for_releases():
    locator = DistributionLocator("https://repo/releases", "https://repo/snapshots")

    uri = locator.get_distribution_for(GradleVersion.version("1.9"))

    assert uri == "https://repo/releases/gradle-1.9-bin.zip"


def test_locator_uses_snapshot_repository_for_snapshots():
    locator = DistributionLocator("https://repo/releases", "https://repo/snapshots/")

    uri = locator.get_distribution_for(GradleVersion.version("1.12-20140327133732+0000"))

    assert uri == "https://repo/snapshots/gradle-1.12-20140327133732+0000-bin.zip"


def test_distribution_uri_is_deterministic():
    version = GradleVersion.version("1.11")

    first = DistributionLocator.get_distribution("https://repo/releases", version, "gradle", "bin")
    second = DistributionLocator.get_distribution("https://repo/releases", version, "gradle", "bin")

    assert first == second == "https://repo/releases/gradle-1.11-bin.zip"


def test_malformed_repository_is_a_configuration_error():
    locator = DistributionLocator("not a repository", "also not one")

    with pytest.raises(ConfigurationError, match="Malformed distribution URI"):
        locator.get_distribution_for(GradleVersion.version("1.9"))


def test_repo_url_prefers_environment_variable():
    environ = {
        "GRADLE_RELEASE_REPOSITORY": "https://mirror/releases",
        "TEAMCITY_VERSION": "8.1",
    }

    assert get_repo_url(False, environ) == "https://mirror/releases"
    assert get_repo_url(True, environ) == (
        "http://services.gradle.org-mirror.labs.intellij.net/distributions-snapshots"
    )


def test_repo_url_is_absent_outside_ci():
    assert get_repo_url(False, {}) is None
    assert get_repo_url(True, {}) is None


def test_build_locator_requires_both_repositories():
    assert build_locator(environ={"GRADLE_RELEASE_REPOSITORY": "https://mirror/releases"}) is None

    locator = build_locator(environ={"TEAMCITY_VERSION": "8.1"})

    assert locator.release_repo_url == "http://services.gradle.org-mirror.labs.intellij.net/distributions"
