"""Hook registry module.

Provides the event/listener facility that one-shot hook registrations
are layered on.

Example usage:
    from oncehook.core.hooks import HookRegistry

    registry = HookRegistry()
    registry.register("after_save", on_save, priority=10)
    registry.trigger("after_save", document)
"""

from oncehook.core.hooks.hook_registry import HookRegistry, RegisteredHook

__all__ = [
    "HookRegistry",
    "RegisteredHook",
]
