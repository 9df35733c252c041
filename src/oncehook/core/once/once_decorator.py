"""Decorator API for one-shot registrations.

Enables registering a function body inline:

    @on_hook_once("after_save")
    def announce_first_save(document):
        ...

    @on_load_once("numpy")
    def configure_numpy():
        ...

The decorated function is returned unchanged.
"""

from collections.abc import Hashable
from typing import Any, Callable, Optional, TypeVar

from oncehook.core.once.context import OnceContext, get_default_context
from oncehook.core.once.hook_once import add_hook_once
from oncehook.core.once.load_once import after_load_once

F = TypeVar("F", bound=Callable[..., Any])


class OnceDecorator:
    """Provides decorator syntax bound to one OnceContext.

    Attributes:
        _context: The context registrations are made in, or None to
            resolve the default context at decoration time.

    Example:
        once = OnceDecorator(context)

        @once.hook("after_save", priority=10)
        def announce_first_save(document):
            print("first save:", document)
    """

    def __init__(self, context: Optional[OnceContext] = None) -> None:
        self._context = context

    @property
    def context(self) -> OnceContext:
        """Get the context registrations are made in."""
        return self._context or get_default_context()

    def hook(
        self,
        event: str,
        priority: int = 0,
        scope: Optional[Hashable] = None,
    ) -> Callable[[F], F]:
        """Register the decorated function with add_hook_once."""

        def decorator(func: F) -> F:
            add_hook_once(event, func, priority=priority, scope=scope, context=self.context)
            return func

        return decorator

    def after_load(self, module_name: str) -> Callable[[F], F]:
        """Register the decorated function with after_load_once.

        If the module is already loaded the function runs during
        decoration.
        """

        def decorator(func: F) -> F:
            after_load_once(module_name, func, context=self.context)
            return func

        return decorator


def on_hook_once(
    event: str,
    priority: int = 0,
    scope: Optional[Hashable] = None,
    *,
    context: Optional[OnceContext] = None,
) -> Callable[[F], F]:
    """Decorator form of add_hook_once."""
    return OnceDecorator(context).hook(event, priority=priority, scope=scope)


def on_load_once(
    module_name: str,
    *,
    context: Optional[OnceContext] = None,
) -> Callable[[F], F]:
    """Decorator form of after_load_once."""
    return OnceDecorator(context).after_load(module_name)
