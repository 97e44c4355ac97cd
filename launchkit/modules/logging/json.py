import sys
from .base import BaseLogger


class JsonLogger(BaseLogger):
    """Logger that outputs JSON for log collectors."""

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        # Configure loguru for JSON output
        self.logger.configure(
            handlers=[{
                "sink": sys.stderr,
                "serialize": True,  # JSON output
                "format": "{time} | {level} | {message}",
                "level": self.log_level
            }]
        )

    def _log(self, level: str, kind: str, message: str):
        self.logger.bind(type=kind).log(level, message)

    def log_fatal(self, message: str):
        self._log("CRITICAL", "fatal", message)

    def log_error(self, message: str):
        self._log("ERROR", "error", message)

    def log_warning(self, message: str):
        self._log("WARNING", "warning", message)

    def log_info(self, message: str):
        self._log("INFO", "info", message)

    def log_debug(self, message: str):
        self._log("DEBUG", "debug", message)
