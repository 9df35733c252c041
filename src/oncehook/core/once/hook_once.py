"""One-shot hook registration.

Both helpers register a wrapper that removes itself from the event's
listener set before forwarding to the callback:

- add_hook_once: repeated calls with the same event, callback and scope
  share one wrapper, so the callback runs once on the next trigger.
- add_hook_once_stacking: every call adds an independent wrapper, so N
  calls mean N runs on the next trigger.
"""

from collections.abc import Hashable
from typing import Any, Callable, Optional

from oncehook.core.logging import get_logger
from oncehook.core.once.context import OnceContext, get_default_context
from oncehook.domain.entities.once_wrapper import OnceWrapper

logger = get_logger(__name__)


def add_hook_once(
    event: str,
    callback: Callable[..., Any],
    priority: int = 0,
    scope: Optional[Hashable] = None,
    *,
    context: Optional[OnceContext] = None,
) -> Optional[str]:
    """Run callback the next time event is triggered, then forget it.

    If callback is already registered directly on the event (under the
    same scope) nothing happens, mirroring the registry's own rule that
    adding a present listener is a no-op.

    Args:
        event: Event name.
        callback: Callable receiving the event's arguments.
        priority: Listener priority (higher = earlier).
        scope: Optional scope key for a local listener.
        context: OnceContext to use instead of the default one.

    Returns:
        The wrapper id, or None if callback was already registered.

    Example:
        add_hook_once("after_save", announce_first_save)
        add_hook_once("after_save", announce_first_save)  # same wrapper
    """
    context = context or get_default_context()
    hooks = context.hooks

    if hooks.is_registered(event, callback, scope):
        logger.debug("Callback already registered directly", hook_event=event, scope=scope)
        return None

    wrapper_id = context.name(event, callback, scope)

    def detach(wrapper: OnceWrapper) -> None:
        hooks.remove(event, wrapper, scope)
        logger.debug(
            "Hook wrapper detached",
            wrapper_id=wrapper.id,
            hook_event=event,
            state=wrapper.state.value,
        )

    wrapper = context.obtain(
        wrapper_id,
        lambda: OnceWrapper(
            id=wrapper_id,
            target=event,
            callback=callback,
            scope=scope,
            detach=detach,
        ),
    )

    hooks.register(event, wrapper, priority=priority, scope=scope)
    return wrapper_id


def add_hook_once_stacking(
    event: str,
    callback: Callable[..., Any],
    priority: int = 0,
    scope: Optional[Hashable] = None,
    *,
    context: Optional[OnceContext] = None,
) -> str:
    """Add an independent one-shot listener for event.

    Unlike add_hook_once, every call creates a new wrapper; each one
    removes itself from the event and from the context's registry when
    it fires.

    Returns:
        The new wrapper id.
    """
    context = context or get_default_context()
    hooks = context.hooks
    wrapper_id = context.next_sequential_id()

    def detach(wrapper: OnceWrapper) -> None:
        hooks.remove(event, wrapper, scope)
        context.release(wrapper.id)
        logger.debug(
            "Stacking hook wrapper detached",
            wrapper_id=wrapper.id,
            hook_event=event,
            state=wrapper.state.value,
        )

    wrapper = OnceWrapper(
        id=wrapper_id,
        target=event,
        callback=callback,
        scope=scope,
        stacking=True,
        detach=detach,
    )

    hooks.register(event, wrapper, priority=priority, scope=scope)
    context.record(wrapper)
    return wrapper_id
