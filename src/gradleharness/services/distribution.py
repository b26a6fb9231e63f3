"""Gradle distribution resolution for gradleharness."""

import os
import re
from typing import Mapping, Optional
from urllib.parse import urlparse

from packaging import version as packaging_version

from gradleharness.constants import (
    DISTRIBUTION_ARCHIVE_NAME,
    DISTRIBUTION_CLASSIFIER,
    INTELLIJ_LABS_GRADLE_RELEASE_MIRROR,
    INTELLIJ_LABS_GRADLE_SNAPSHOT_MIRROR,
    RELEASE_REPOSITORY_ENV,
    SNAPSHOT_REPOSITORY_ENV,
    TEAMCITY_ENV,
)
from gradleharness.errors import ConfigurationError
from gradleharness.errors_catalog import actionable_error


class GradleVersion:
    """Parsed Gradle version string, following Gradle's own version format."""

    VERSION_PATTERN = re.compile(
        r"((\d+)(\.\d+)+)(-([a-zA-Z]+)-(\d+[a-z]?))?(-(SNAPSHOT|\d{14}([-+]\d{4})?))?"
    )

    def __init__(self, version: str, base: str, stage: Optional[str], snapshot: bool):
        self._version = version
        self._base = base
        self.stage = stage
        self.is_snapshot = snapshot

    @classmethod
    def version(cls, text: str) -> "GradleVersion":
        clean = (text or "").strip()
        match = cls.VERSION_PATTERN.fullmatch(clean)
        if not match:
            raise ConfigurationError(actionable_error("invalid_gradle_version", version=text))

        stage = None
        if match.group(4):
            stage = f"{match.group(5)}-{match.group(6)}"
        return cls(clean, match.group(1), stage, match.group(7) is not None)

    def get_version(self) -> str:
        return self._version

    @property
    def base_version(self) -> packaging_version.Version:
        return packaging_version.parse(self._base)

    def __eq__(self, other) -> bool:
        return isinstance(other, GradleVersion) and other._version == self._version

    def __hash__(self) -> int:
        return hash(self._version)

    def __str__(self) -> str:
        return self._version

    def __repr__(self) -> str:
        return f"GradleVersion({self._version!r})"


def validate_uri(uri: str) -> str:
    parsed = urlparse(uri)
    scheme = parsed.scheme.lower()
    if scheme in {"http", "https"} and parsed.netloc and parsed.path:
        return uri
    if scheme == "file" and parsed.path:
        return uri
    raise ConfigurationError(actionable_error("malformed_distribution_uri", uri=uri))


class DistributionLocator:
    """Maps Gradle versions to distribution archive URIs on a release/snapshot mirror pair."""

    def __init__(self, release_repo_url: str, snapshot_repo_url: str):
        self._release_repo_url = release_repo_url.rstrip("/")
        self._snapshot_repo_url = snapshot_repo_url.rstrip("/")

    @property
    def release_repo_url(self) -> str:
        return self._release_repo_url

    @property
    def snapshot_repo_url(self) -> str:
        return self._snapshot_repo_url

    def get_distribution_for(self, version: GradleVersion) -> str:
        return self.get_distribution(
            self.get_distribution_repository(version),
            version,
            DISTRIBUTION_ARCHIVE_NAME,
            DISTRIBUTION_CLASSIFIER,
        )

    def get_distribution_repository(self, version: GradleVersion) -> str:
        return self._snapshot_repo_url if version.is_snapshot else self._release_repo_url

    @staticmethod
    def get_distribution(
        repository_url: str,
        version: GradleVersion,
        archive_name: str,
        archive_classifier: str,
    ) -> str:
        uri = f"{repository_url}/{archive_name}-{version.get_version()}-{archive_classifier}.zip"
        return validate_uri(uri)


def is_under_teamcity(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    return bool(env.get(TEAMCITY_ENV))


def get_repo_url(is_snapshot_url: bool, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    env = os.environ if environ is None else environ
    configured = env.get(SNAPSHOT_REPOSITORY_ENV if is_snapshot_url else RELEASE_REPOSITORY_ENV)
    if configured:
        return configured

    if is_under_teamcity(env):
        if is_snapshot_url:
            return INTELLIJ_LABS_GRADLE_SNAPSHOT_MIRROR
        return INTELLIJ_LABS_GRADLE_RELEASE_MIRROR

    return None


def build_locator(
    release_repo_url: Optional[str] = None,
    snapshot_repo_url: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[DistributionLocator]:
    """Return a locator when both repositories resolve, else None (resolve by version name)."""
    release = release_repo_url or get_repo_url(False, environ)
    snapshot = snapshot_repo_url or get_repo_url(True, environ)
    if release is None or snapshot is None:
        return None
    return DistributionLocator(release, snapshot)
