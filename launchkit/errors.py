from typing import Any, Dict, Optional


class LaunchError(Exception):
    """Base class for launcher errors."""
    pass

class ConfigurationError(LaunchError):
    def __init__(self, message: str, source: Optional[Any] = None):
        self.source = source
        if source is not None:
            message = f"{message} ({source})"
        super().__init__(message)

class InitializationError(LaunchError):
    """Any non-cancellation error surfaced while starting the runtime."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        self.kind = type(cause).__name__
        super().__init__(f"{self.kind}: {cause}")

class UnhandledAsyncError(LaunchError):
    def __init__(self, context: Dict[str, Any]):
        self.context = context
        self.cause: Optional[BaseException] = context.get("exception")
        message = context.get("message") or "Unhandled error"
        if self.cause is not None:
            message = f"{message}: {type(self.cause).__name__}: {self.cause}"
        super().__init__(message)

class WrongUsageError(LaunchError):
    pass

class ModuleConflictError(LaunchError):
    def __init__(self, key: str, loaded_version: str, version: str):
        self.key = key
        self.loaded_version = loaded_version
        self.version = version
        super().__init__(
            f"Module '{key}' is already loaded (version {loaded_version}), "
            f"refusing to load version {version}"
        )
