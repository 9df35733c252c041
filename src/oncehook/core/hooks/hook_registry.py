"""Hook registry - event listener registration and dispatch.

The HookRegistry is the event/listener facility the once helpers build on.
It provides:
- Registration of listeners with priority and an optional scope
- Duplicate-free listener sets (adding a present listener is a no-op)
- Execution of listeners in priority order
- Error logging with propagation to the caller

Mutations hold a lock so registrations from several threads stay
duplicate-free. Listeners run outside the lock.
"""

import inspect
import threading
import uuid
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Callable, Optional

from oncehook.core.exceptions import InvalidEventError
from oncehook.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RegisteredHook:
    """Internal representation of a registered listener.

    Attributes:
        id: Unique identifier for this registration.
        event: The event this listener is registered for.
        callback: The callable to invoke.
        priority: Execution priority (higher = earlier).
        scope: Scope key for local listeners, None for global ones.
        registration_order: Order in which this listener was registered.
    """

    id: str
    event: str
    callback: Callable
    priority: int = 0
    scope: Optional[Hashable] = None
    registration_order: int = 0


class HookRegistry:
    """Event listener registration and dispatch.

    Listeners are kept per ``(event, scope)`` pair. A scope of ``None``
    means the global listener set; any other hashable value (a session,
    a document, a view) names a local set that only fires when the
    event is triggered for that scope.

    Example:
        registry = HookRegistry()

        hook_id = registry.register("after_save", on_save, priority=10)
        registry.trigger("after_save", document)
        registry.remove("after_save", on_save)
    """

    def __init__(self) -> None:
        """Initialize the hook registry."""
        self._hooks: dict[tuple[str, Optional[Hashable]], list[RegisteredHook]] = {}
        self._registration_counter: int = 0
        self._hook_map: dict[str, RegisteredHook] = {}  # hook_id -> hook
        self._lock = threading.RLock()

    def register(
        self,
        event: str,
        callback: Callable,
        priority: int = 0,
        scope: Optional[Hashable] = None,
    ) -> str:
        """Register a listener for an event.

        Adding a callback that is already registered on the same event and
        scope changes nothing, even if the priority differs; the id of the
        existing registration is returned.

        Args:
            event: Event name.
            callback: Callable to execute when the event is triggered.
            priority: Execution priority. Higher priority listeners run first.
            scope: Optional scope key. None registers a global listener.

        Returns:
            Unique hook_id string for later removal.

        Raises:
            InvalidEventError: If event is not a non-empty string.
        """
        _check_event(event)

        with self._lock:
            existing = self._find(event, callback, scope)
            if existing is not None:
                logger.debug(
                    "Hook already registered",
                    hook_id=existing.id,
                    hook_event=event,
                    scope=scope,
                )
                return existing.id

            hook_id = f"hook_{uuid.uuid4().hex[:12]}"

            # FIFO ordering within same priority
            self._registration_counter += 1

            hook = RegisteredHook(
                id=hook_id,
                event=event,
                callback=callback,
                priority=priority,
                scope=scope,
                registration_order=self._registration_counter,
            )

            self._hooks.setdefault((event, scope), []).append(hook)
            self._hook_map[hook_id] = hook

        logger.debug(
            "Hook registered",
            hook_id=hook_id,
            hook_event=event,
            priority=priority,
            scope=scope,
        )

        return hook_id

    def unregister(self, hook_id: str) -> bool:
        """Remove a registered listener by id.

        Args:
            hook_id: The unique ID returned from register().

        Returns:
            True if the listener was removed, False if not found.
        """
        with self._lock:
            hook = self._hook_map.pop(hook_id, None)
            if hook is None:
                logger.debug("Hook not found for unregister", hook_id=hook_id)
                return False

            key = (hook.event, hook.scope)
            remaining = [h for h in self._hooks.get(key, []) if h.id != hook_id]
            if remaining:
                self._hooks[key] = remaining
            else:
                self._hooks.pop(key, None)

        logger.debug("Hook unregistered", hook_id=hook_id, hook_event=hook.event, scope=hook.scope)

        return True

    def remove(
        self,
        event: str,
        callback: Callable,
        scope: Optional[Hashable] = None,
    ) -> bool:
        """Remove a callback from an event's listener set.

        Args:
            event: Event name.
            callback: The callable that was registered.
            scope: The scope it was registered under.

        Returns:
            True if the callback was removed, False if it was not registered.
        """
        _check_event(event)
        with self._lock:
            hook = self._find(event, callback, scope)
            if hook is None:
                return False
            return self.unregister(hook.id)

    def is_registered(
        self,
        event: str,
        callback: Callable,
        scope: Optional[Hashable] = None,
    ) -> bool:
        """Check whether callback is directly registered on event/scope."""
        _check_event(event)
        return self._find(event, callback, scope) is not None

    def trigger(
        self,
        event: str,
        *args: Any,
        scope: Optional[Hashable] = None,
        **kwargs: Any,
    ) -> list[Any]:
        """Run all listeners for an event.

        Global listeners always run; when a scope is given its local
        listeners run too. Listeners execute in priority order (higher
        first), then in registration order. A listener removed by an
        earlier listener during the same dispatch is skipped.

        Args:
            event: Event name.
            *args: Positional arguments passed to every listener.
            scope: Optional scope whose local listeners should also run.
            **kwargs: Keyword arguments passed to every listener.

        Returns:
            The listeners' return values, in execution order.
        """
        results = []
        for hook in self._dispatch_order(event, scope):
            if hook.id not in self._hook_map:
                continue
            results.append(self._execute_hook(hook, args, kwargs))
        return results

    async def trigger_async(
        self,
        event: str,
        *args: Any,
        scope: Optional[Hashable] = None,
        **kwargs: Any,
    ) -> list[Any]:
        """Run all listeners for an event, awaiting awaitable results.

        Ordering and skipping rules are the same as trigger().
        """
        results = []
        for hook in self._dispatch_order(event, scope):
            if hook.id not in self._hook_map:
                continue
            result = self._execute_hook(hook, args, kwargs)
            if inspect.isawaitable(result):
                try:
                    result = await result
                except Exception as e:
                    _log_failure(hook, e)
                    raise
            results.append(result)
        return results

    def _dispatch_order(self, event: str, scope: Optional[Hashable]) -> list[RegisteredHook]:
        _check_event(event)
        hooks = list(self._hooks.get((event, None), []))
        if scope is not None:
            hooks.extend(self._hooks.get((event, scope), []))
        if not hooks:
            return []

        logger.debug(
            "Triggering hooks",
            hook_event=event,
            hook_count=len(hooks),
            scope=scope,
        )

        # Sort by priority (descending), then registration order (ascending)
        return sorted(hooks, key=lambda h: (-h.priority, h.registration_order))

    def _execute_hook(
        self,
        hook: RegisteredHook,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        try:
            return hook.callback(*args, **kwargs)
        except Exception as e:
            _log_failure(hook, e)
            raise

    def _find(
        self,
        event: str,
        callback: Callable,
        scope: Optional[Hashable],
    ) -> Optional[RegisteredHook]:
        for hook in self._hooks.get((event, scope), []):
            if hook.callback == callback:
                return hook
        return None

    def get_hooks_for_event(
        self,
        event: str,
        scope: Optional[Hashable] = None,
    ) -> list[RegisteredHook]:
        """Get the listeners registered for an event under one scope.

        Args:
            event: Event name.
            scope: Scope key, None for the global listener set.

        Returns:
            List of registered listeners, in registration order.
        """
        return list(self._hooks.get((event, scope), []))

    def get_callbacks(
        self,
        event: str,
        scope: Optional[Hashable] = None,
    ) -> list[Callable]:
        """Get the callables registered for an event under one scope."""
        return [hook.callback for hook in self._hooks.get((event, scope), [])]

    def get_hook_by_id(self, hook_id: str) -> Optional[RegisteredHook]:
        """Get a listener registration by its ID."""
        return self._hook_map.get(hook_id)

    def clear(self) -> int:
        """Remove all registered listeners.

        Returns:
            Number of listeners removed.
        """
        with self._lock:
            count = len(self._hook_map)
            self._hooks.clear()
            self._hook_map.clear()
        logger.debug("Hooks cleared", count=count)
        return count


def _check_event(event: object) -> None:
    if not isinstance(event, str) or not event:
        raise InvalidEventError(event)


def _log_failure(hook: RegisteredHook, error: Exception) -> None:
    logger.error(
        "Hook execution failed",
        hook_id=hook.id,
        hook_event=hook.event,
        scope=hook.scope,
        error=str(error),
    )
