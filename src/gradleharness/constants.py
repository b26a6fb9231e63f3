"""Shared constants for gradleharness."""

import re

GRADLE_V1_9 = "1.9"
GRADLE_V1_10 = "1.10"
GRADLE_V1_11 = "1.11"
GRADLE_V1_12 = "1.12-20140327133732+0000"

SUPPORTED_VERSIONS = (GRADLE_V1_9, GRADLE_V1_10, GRADLE_V1_11, GRADLE_V1_12)

TEST_METHOD_NAME_PATTERN = re.compile(r"(.*)\[(\d*)\]")

BUILD_SCRIPT_NAME = "build.gradle"
SETTINGS_FILE_NAME = "settings.gradle"
INIT_SCRIPT_CMD_OPTION = "--init-script"

TEMP_ROOT_NAME = "gradleTests"

RELEASE_REPOSITORY_ENV = "GRADLE_RELEASE_REPOSITORY"
SNAPSHOT_REPOSITORY_ENV = "GRADLE_SNAPSHOT_REPOSITORY"
TEAMCITY_ENV = "TEAMCITY_VERSION"
INTELLIJ_LABS_GRADLE_RELEASE_MIRROR = "http://services.gradle.org-mirror.labs.intellij.net/distributions"
INTELLIJ_LABS_GRADLE_SNAPSHOT_MIRROR = (
    "http://services.gradle.org-mirror.labs.intellij.net/distributions-snapshots"
)
GRADLE_RELEASE_REPOSITORY = "https://services.gradle.org/distributions"
GRADLE_SNAPSHOT_REPOSITORY = "https://services.gradle.org/distributions-snapshots"

DISTRIBUTION_ARCHIVE_NAME = "gradle"
DISTRIBUTION_CLASSIFIER = "bin"

DAEMON_MAX_IDLE_SECONDS = 1

IMPORT_REQUEST_PROPERTY = "gradleharness.importRequest"
IMPORT_RESULT_PROPERTY = "gradleharness.importResult"
IMPORT_TASK = "help"

EXTERNAL_PROJECT_MODEL = "ExternalProject"
GRADLE_BUILD_MODEL = "GradleBuild"
BUILD_ENVIRONMENT_MODEL = "BuildEnvironment"
PROJECT_DEPENDENCIES_MODEL = "ProjectDependencies"

KNOWN_MODELS = (
    EXTERNAL_PROJECT_MODEL,
    GRADLE_BUILD_MODEL,
    BUILD_ENVIRONMENT_MODEL,
    PROJECT_DEPENDENCIES_MODEL,
)
DEFAULT_MODELS = (GRADLE_BUILD_MODEL, BUILD_ENVIRONMENT_MODEL)

