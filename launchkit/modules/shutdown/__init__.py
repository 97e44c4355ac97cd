"""Shutdown coordination for a started runtime."""

from .coordinator import ShutdownCoordinator, Runtime
from .guard import ShutdownGuard

__all__ = ['ShutdownCoordinator', 'ShutdownGuard', 'Runtime']
