from .registry import ModuleRegistry, ALLOW_CONFLICT_MODULES_ENV

__all__ = ['ModuleRegistry', 'ALLOW_CONFLICT_MODULES_ENV']
