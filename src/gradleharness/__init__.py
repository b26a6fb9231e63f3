"""
gradleharness - Gradle model-builder integration test harness
"""

__version__ = "0.1.0"

from .core import LifecycleState, ModelBuilderHarness, ModelImportInvocation
from .errors import ConfigurationError, FixtureError, HarnessContractError, HarnessError, ToolExecutionError
from .models import ModelSnapshot, VersionRunResult

__all__ = [
    "ConfigurationError",
    "FixtureError",
    "HarnessContractError",
    "HarnessError",
    "LifecycleState",
    "ModelBuilderHarness",
    "ModelImportInvocation",
    "ModelSnapshot",
    "ToolExecutionError",
    "VersionRunResult",
]
