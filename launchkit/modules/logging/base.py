from abc import ABC, abstractmethod
from loguru import logger


class BaseLogger(ABC):
    """Abstract base class for loggers."""

    def __init__(self, log_level: str = "INFO"):
        self.logger = logger
        self.log_level = log_level.upper()

    def is_enabled(self, level: str) -> bool:
        """Check whether messages of the given level reach the sink."""
        return self.logger.level(level.upper()).no >= self.logger.level(self.log_level).no

    @property
    def is_debug_enabled(self) -> bool:
        return self.is_enabled("DEBUG")

    @property
    def is_info_enabled(self) -> bool:
        return self.is_enabled("INFO")

    @property
    def is_fatal_enabled(self) -> bool:
        return self.is_enabled("CRITICAL")

    def flush(self) -> None:
        """Wait for enqueued messages to be written."""
        self.logger.complete()

    @abstractmethod
    def log_fatal(self, message: str):
        """Log a fatal message."""
        pass

    @abstractmethod
    def log_error(self, message: str):
        """Log an error message."""
        pass

    @abstractmethod
    def log_warning(self, message: str):
        """Log a warning message."""
        pass

    @abstractmethod
    def log_info(self, message: str):
        """Log an info message."""
        pass

    @abstractmethod
    def log_debug(self, message: str):
        """Log a debug message."""
        pass
