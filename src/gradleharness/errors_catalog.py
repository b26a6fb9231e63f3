"""Actionable error catalog for gradleharness."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "fixture_not_found": {
        "what": "Fixture resource not found: {path}",
        "next": "Add `{name}` under the fixture directory for test `{test}`.",
    },
    "malformed_distribution_uri": {
        "what": "Malformed distribution URI: {uri}",
        "next": "Check GRADLE_RELEASE_REPOSITORY / GRADLE_SNAPSHOT_REPOSITORY values.",
    },
    "invalid_gradle_version": {
        "what": "Invalid Gradle version: {version}",
        "next": "Use versions like `1.9`, `1.12-rc-1` or `1.12-20140327133732+0000`.",
    },
    "gradle_executable_not_found": {
        "what": "No Gradle launcher found in distribution {path}.",
        "next": "Remove the cached distribution directory and retry the download.",
    },
    "import_action_failed": {
        "what": "Model import with Gradle {version} failed.",
        "next": "Run again with --verbose to see the Gradle output.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
