"""Once context - wrapper registry and host facilities.

An OnceContext bundles everything the once helpers need: the hook registry
and load registry they register wrappers with, the naming service, and the
table of wrappers created so far. Helpers use the process-wide default
context unless one is passed explicitly.
"""

import itertools
import threading
from typing import Callable, Optional

from oncehook.core.config import Settings, get_settings
from oncehook.core.hooks.hook_registry import HookRegistry
from oncehook.core.loading.import_watcher import ImportWatcher
from oncehook.core.loading.load_registry import LoadRegistry
from oncehook.core.logging import get_logger
from oncehook.domain.entities.once_wrapper import OnceWrapper
from oncehook.domain.services.once_namer import OnceNamer

logger = get_logger(__name__)


class OnceContext:
    """Owner of one-shot wrappers and the facilities they are registered with.

    Attributes:
        hooks: Event listener facility.
        loads: Module-availability facility.
        namer: Wrapper naming service.
        watcher: Import watcher feeding ``loads``, when enabled.

    Example:
        context = OnceContext()
        add_hook_once("after_save", notify, context=context)
        context.hooks.trigger("after_save", document)
        assert context.wrapper_ids == [...]
    """

    def __init__(
        self,
        hooks: Optional[HookRegistry] = None,
        loads: Optional[LoadRegistry] = None,
        settings: Optional[Settings] = None,
        watch_imports: bool = False,
    ) -> None:
        self.hooks = hooks if hooks is not None else HookRegistry()
        self.loads = loads if loads is not None else LoadRegistry()
        self.namer = OnceNamer(prefix=settings.name_prefix if settings else "once")
        self._wrappers: dict[str, OnceWrapper] = {}
        self._counter = itertools.count(1)
        self._lock = threading.RLock()

        self.watcher: Optional[ImportWatcher] = None
        if watch_imports:
            self.watcher = ImportWatcher(self.loads)
            self.watcher.install()

    def name(self, *parts: object) -> str:
        """Generate the deterministic wrapper id for an identifier tuple."""
        return self.namer.generate(*parts)

    def next_sequential_id(self) -> str:
        """Generate a fresh id for a stacking wrapper."""
        with self._lock:
            return self.namer.sequential(next(self._counter))

    @property
    def wrapper_ids(self) -> list[str]:
        """Ids of all recorded wrappers, in registration order."""
        with self._lock:
            return list(self._wrappers)

    def get_wrapper(self, wrapper_id: str) -> Optional[OnceWrapper]:
        """Get a recorded wrapper by id."""
        with self._lock:
            return self._wrappers.get(wrapper_id)

    def obtain(
        self,
        wrapper_id: str,
        factory: Callable[[], OnceWrapper],
    ) -> OnceWrapper:
        """Return the wrapper for wrapper_id, creating and recording it if needed.

        Lookup, creation and recording happen under one lock, so concurrent
        callers with the same id always share one wrapper. A reused wrapper
        that is no longer armed is re-armed.
        """
        with self._lock:
            wrapper = self._wrappers.get(wrapper_id)
            if wrapper is None:
                self._wrappers[wrapper_id] = wrapper = factory()
                return wrapper
            if not wrapper.armed:
                wrapper.rearm()
                logger.debug("Wrapper re-armed", wrapper_id=wrapper_id)
            return wrapper

    def record(self, wrapper: OnceWrapper) -> None:
        """Add a wrapper to the registry (no-op if already present)."""
        with self._lock:
            self._wrappers.setdefault(wrapper.id, wrapper)

    def release(self, wrapper_id: str) -> None:
        """Drop a wrapper from the registry without touching its host."""
        with self._lock:
            self._wrappers.pop(wrapper_id, None)

    def discard(self, wrapper_id: str) -> bool:
        """Disarm a wrapper, detach it from its host and forget it.

        Returns:
            True if the wrapper was recorded, False otherwise.
        """
        with self._lock:
            wrapper = self._wrappers.pop(wrapper_id, None)
        if wrapper is None:
            return False

        if wrapper.armed:
            wrapper.disarm()
            if wrapper.detach is not None:
                wrapper.detach(wrapper)

        logger.debug("Wrapper discarded", wrapper_id=wrapper_id, target=wrapper.target)
        return True

    def clear(self) -> int:
        """Discard every recorded wrapper.

        Returns:
            Number of wrappers discarded.
        """
        return sum(1 for wrapper_id in self.wrapper_ids if self.discard(wrapper_id))

    def close(self) -> None:
        """Uninstall the import watcher, if this context installed one."""
        if self.watcher is not None:
            self.watcher.uninstall()


_default_context: Optional[OnceContext] = None
_default_lock = threading.Lock()


def get_default_context() -> OnceContext:
    """Get the process-wide context, creating it on first use."""
    global _default_context
    with _default_lock:
        if _default_context is None:
            settings = get_settings()
            _default_context = OnceContext(
                settings=settings,
                watch_imports=settings.watch_imports,
            )
        return _default_context


def reset_default_context() -> None:
    """Discard the process-wide context; the next use builds a fresh one."""
    global _default_context
    with _default_lock:
        if _default_context is not None:
            _default_context.close()
        _default_context = None
