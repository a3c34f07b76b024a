"""Core functionality for lifecycle unit-state synchronization."""

from .config_manager import ConfigManager
from .executor import HookReport, InvocationError, LifecycleHookExecutor
from .guarded import guarded_call
from .service_manager import HelperTool, ServiceManager

__all__ = [
    "ConfigManager",
    "HelperTool",
    "HookReport",
    "InvocationError",
    "LifecycleHookExecutor",
    "ServiceManager",
    "guarded_call",
]
