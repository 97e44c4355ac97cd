"""Process-scoped registry detecting a package loaded twice."""

import os
import threading
from typing import Dict, Optional

from ...errors import ModuleConflictError
from ..logging import BaseLogger

ALLOW_CONFLICT_MODULES_ENV = "LAUNCHKIT_ALLOW_CONFLICT_MODULES"


class ModuleRegistry:
    """Tracks which package versions were initialized in this process."""

    _instance: Optional['ModuleRegistry'] = None
    _instance_lock = threading.Lock()

    def __init__(self, allow_conflicts: bool = False, logger: Optional[BaseLogger] = None):
        """
        Initialize the registry.

        Args:
            allow_conflicts: Downgrade a duplicate load from an error to a warning
            logger: Logger used for conflict warnings
        """
        self.allow_conflicts = allow_conflicts
        self.logger = logger
        self._modules: Dict[str, str] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(
        cls,
        allow_conflicts: Optional[bool] = None,
        logger: Optional[BaseLogger] = None
    ) -> 'ModuleRegistry':
        """
        Get or create the process-wide registry.

        The arguments only apply when the registry is created; without
        allow_conflicts the policy is read from the environment.
        """
        with cls._instance_lock:
            if cls._instance is None:
                if allow_conflicts is None:
                    allow_conflicts = os.environ.get(ALLOW_CONFLICT_MODULES_ENV) == "1"
                cls._instance = cls(allow_conflicts, logger)
            return cls._instance

    def init(self, key: str, version: str) -> None:
        """
        Record that a package was initialized.

        Raises:
            ModuleConflictError: If the key is already registered and conflicts are not allowed
        """
        with self._lock:
            loaded_version = self._modules.get(key)
            if loaded_version is None:
                self._modules[key] = version
                return

        error = ModuleConflictError(key, loaded_version, version)
        if not self.allow_conflicts:
            raise error
        if self.logger:
            self.logger.log_warning(f"{error}. Continuing because {ALLOW_CONFLICT_MODULES_ENV}=1")

    def is_loaded(self, key: str) -> bool:
        return key in self._modules

    def version_of(self, key: str) -> Optional[str]:
        return self._modules.get(key)
