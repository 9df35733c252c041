"""oncehook - one-shot hooks and after-load callbacks.

Register a callback to run the next time an event fires, or the next
time a module becomes available, without writing the bookkeeping that
removes it again afterwards.
"""

__version__ = "0.1.0"

from oncehook.core.exceptions import (
    InvalidEventError,
    InvalidModuleNameError,
    OnceHookError,
)
from oncehook.core.hooks import HookRegistry, RegisteredHook
from oncehook.core.loading import ImportWatcher, LoadRegistry
from oncehook.core.once import (
    OnceContext,
    OnceDecorator,
    add_hook_once,
    add_hook_once_stacking,
    after_load_once,
    after_load_once_stacking,
    get_default_context,
    on_hook_once,
    on_load_once,
    reset_default_context,
)
from oncehook.domain.entities import OnceWrapper, WrapperState
from oncehook.domain.services import OnceNamer


def once_name(*parts: object) -> str:
    """Generate a wrapper id with the default context's naming rules."""
    return get_default_context().name(*parts)


__all__ = [
    "__version__",
    "once_name",
    "add_hook_once",
    "add_hook_once_stacking",
    "after_load_once",
    "after_load_once_stacking",
    "on_hook_once",
    "on_load_once",
    "OnceDecorator",
    "OnceContext",
    "get_default_context",
    "reset_default_context",
    "HookRegistry",
    "RegisteredHook",
    "LoadRegistry",
    "ImportWatcher",
    "OnceWrapper",
    "WrapperState",
    "OnceNamer",
    "OnceHookError",
    "InvalidEventError",
    "InvalidModuleNameError",
]
