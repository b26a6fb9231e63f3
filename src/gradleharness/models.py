"""Shared domain models for gradleharness."""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .constants import BUILD_SCRIPT_NAME, DEFAULT_MODELS, KNOWN_MODELS, SETTINGS_FILE_NAME
from .errors import HarnessError, ToolExecutionError


@dataclass(frozen=True)
class Workspace:
    """Per-invocation project directory holding the two descriptor fixtures."""

    name: str
    path: Path

    @property
    def build_file(self) -> Path:
        return self.path / BUILD_SCRIPT_NAME

    @property
    def settings_file(self) -> Path:
        return self.path / SETTINGS_FILE_NAME


class ImportAction:
    """Request for the set of models Gradle should build for a project."""

    def __init__(self, include_default_models: bool = False):
        self.include_default_models = include_default_models
        self._model_names: List[str] = []

    @property
    def model_names(self) -> List[str]:
        return list(self._model_names)

    def add_extra_project_model_classes(self, model_names: Iterable[Any]):
        for model in model_names:
            name = model if isinstance(model, str) else getattr(model, "__name__", str(model))
            if name not in KNOWN_MODELS:
                raise HarnessError(
                    f"Unknown model '{name}'. Known models: {', '.join(KNOWN_MODELS)}"
                )
            if name not in self._model_names:
                self._model_names.append(name)

    def expected_model_names(self) -> List[str]:
        names = list(self._model_names)
        if self.include_default_models:
            names.extend(name for name in DEFAULT_MODELS if name not in names)
        return names

    def to_request(self) -> Dict[str, Any]:
        return {
            "models": self.model_names,
            "includeDefaultModels": self.include_default_models,
        }


class ModelSnapshot:
    """Read-only bag of model instances returned by one import action."""

    def __init__(self, models: Mapping[str, Any], gradle_version: Optional[str] = None):
        self._models = MappingProxyType(dict(models))
        self.gradle_version = gradle_version

    @classmethod
    def from_result(cls, data: Any) -> "ModelSnapshot":
        if not isinstance(data, dict):
            raise ToolExecutionError(f"Import result must be a JSON object, got {type(data).__name__}.")
        models = data.get("models")
        if not isinstance(models, dict):
            raise ToolExecutionError("Import result is missing the 'models' mapping.")
        return cls(models=models, gradle_version=data.get("gradleVersion"))

    @property
    def models(self) -> Mapping[str, Any]:
        return self._models

    @property
    def model_names(self) -> List[str]:
        return sorted(self._models)

    def get_model(self, name: str) -> Any:
        return self._models.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __repr__(self) -> str:
        return f"ModelSnapshot(gradle_version={self.gradle_version!r}, models={self.model_names!r})"


@dataclass(frozen=True)
class VersionRunResult:
    """Outcome of one (test, version) invocation."""

    version: str
    snapshot: Optional[ModelSnapshot] = None
    error: Optional[BaseException] = None

    @property
    def passed(self) -> bool:
        return self.error is None and self.snapshot is not None
