"""pytest integration for gradleharness.

Enable with ``-p gradleharness.pytest_plugin``. Tests that use the
``gradle_version`` fixture run once per Gradle version; the ``all_models``
fixture imports the fixture project named after the test and yields the
resulting snapshot::

    @pytest.mark.gradle_models("ExternalProject")
    def test_external_project(all_models):
        assert all_models.get_model("ExternalProject") is not None
"""

import pytest

from .constants import SUPPORTED_VERSIONS
from .core import ModelBuilderHarness


def pytest_addoption(parser):
    group = parser.getgroup("gradleharness")
    group.addoption(
        "--gradle-versions",
        action="store",
        default=None,
        help="Comma separated Gradle versions to run against (default: all supported versions).",
    )
    group.addoption(
        "--gradle-fixtures",
        action="store",
        default=None,
        help="Directory holding per-test fixture projects (default: <rootdir>/tests/resources).",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "gradle_models(*models): models the all_models fixture requests from Gradle",
    )


def selected_versions(config):
    raw = config.getoption("--gradle-versions")
    if not raw:
        return list(SUPPORTED_VERSIONS)
    return [item.strip() for item in raw.split(",") if item.strip()]


def pytest_generate_tests(metafunc):
    if "gradle_version" not in metafunc.fixturenames:
        return
    versions = selected_versions(metafunc.config)
    # Index ids keep node names in the `name[<index>]` form the workspace key strips.
    metafunc.parametrize("gradle_version", versions, ids=[str(index) for index in range(len(versions))])


@pytest.fixture(scope="session")
def gradle_fixtures_root(pytestconfig):
    configured = pytestconfig.getoption("--gradle-fixtures")
    return configured or str(pytestconfig.rootpath / "tests" / "resources")


@pytest.fixture(scope="session")
def model_builder_harness(gradle_fixtures_root):
    return ModelBuilderHarness(fixtures_root=gradle_fixtures_root)


@pytest.fixture
def all_models(request, model_builder_harness, gradle_version):
    marker = request.node.get_closest_marker("gradle_models")
    if marker is None or not marker.args:
        pytest.fail("all_models needs @pytest.mark.gradle_models(<model>, ...)", pytrace=False)

    # originalname drops every parametrize id, not only the gradle_version index.
    invocation = model_builder_harness.invocation(request.node.originalname, gradle_version, marker.args)
    try:
        yield invocation.set_up()
    finally:
        invocation.tear_down()
