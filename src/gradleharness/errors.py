"""Domain errors for gradleharness."""


class HarnessError(RuntimeError):
    """Raised when a harness run cannot continue."""


class ConfigurationError(HarnessError):
    """Static misconfiguration: repository URLs, versions, config files."""


class FixtureError(HarnessError):
    """A bundled fixture resource is missing or unreadable."""


class ToolExecutionError(HarnessError):
    """Gradle could not be fetched, started or did not complete the import."""


class HarnessContractError(AssertionError):
    """The harness broke one of its own guarantees (null snapshot, null init script)."""
