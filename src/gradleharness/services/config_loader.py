"""Configuration loader for gradleharness."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gradleharness.errors import ConfigurationError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "test_name",
        "models",
        "versions",
        "fixtures_root",
        "temp_root",
        "distributions_dir",
        "release_repository",
        "snapshot_repository",
        "daemon_idle_seconds",
        "include_default_models",
        "download_timeout",
        "retry_count",
        "retry_backoff_seconds",
        "report_file",
        "verbose",
        "log_file",
    }
    LIST_KEYS = ("models", "versions")

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigurationError(f"Unknown configuration keys: {unknown_list}")

        for key in self.LIST_KEYS:
            if key in parsed:
                parsed[key] = self._as_string_list(key, parsed[key])

        return parsed

    @staticmethod
    def _as_string_list(key: str, value: Any):
        if isinstance(value, (str, int, float)):
            return [str(value)]
        if isinstance(value, list) and all(isinstance(item, (str, int, float)) for item in value):
            return [str(item) for item in value]
        raise ConfigurationError(f"Config key '{key}' must be a string or a list of strings.")
