"""One-shot hook and after-load registration.

Example usage:
    from oncehook.core.once import add_hook_once, after_load_once

    add_hook_once("after_save", announce_first_save)
    after_load_once("numpy", configure_numpy)
"""

from oncehook.core.once.context import (
    OnceContext,
    get_default_context,
    reset_default_context,
)
from oncehook.core.once.hook_once import add_hook_once, add_hook_once_stacking
from oncehook.core.once.load_once import after_load_once, after_load_once_stacking
from oncehook.core.once.once_decorator import OnceDecorator, on_hook_once, on_load_once

__all__ = [
    # Context
    "OnceContext",
    "get_default_context",
    "reset_default_context",
    # Hooks
    "add_hook_once",
    "add_hook_once_stacking",
    # Module loads
    "after_load_once",
    "after_load_once_stacking",
    # Decorators
    "OnceDecorator",
    "on_hook_once",
    "on_load_once",
]
