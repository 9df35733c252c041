"""Load registry - deferred callbacks keyed by module name.

The LoadRegistry is the module-availability facility: it answers whether a
module is loaded and queues callables to run once it is.
"""

import sys
import threading
from typing import Callable

from oncehook.core.exceptions import InvalidModuleNameError
from oncehook.core.logging import get_logger

logger = get_logger(__name__)


class LoadRegistry:
    """Track loaded modules and run callbacks after they load.

    A module counts as loaded once ``provide()`` has been called for it or,
    when ``track_sys_modules`` is enabled, while it is present in
    ``sys.modules``.

    Example:
        loads = LoadRegistry()
        loads.run_after_load("numpy", setup_numpy_printing)
        ...
        loads.provide("numpy")  # runs setup_numpy_printing() once
    """

    def __init__(self, track_sys_modules: bool = True) -> None:
        self.track_sys_modules = track_sys_modules
        self._provided: set[str] = set()
        self._pending: dict[str, list[Callable[[], object]]] = {}
        self._lock = threading.RLock()

    def is_loaded(self, module_name: str) -> bool:
        """Check whether a module is loaded.

        A module still executing its body (it is in sys.modules but its
        spec is initializing) does not count as loaded.
        """
        _check_module_name(module_name)
        if module_name in self._provided:
            return True
        if not self.track_sys_modules:
            return False
        module = sys.modules.get(module_name)
        if module is None:
            return False
        spec = getattr(module, "__spec__", None)
        return not getattr(spec, "_initializing", False)

    def run_after_load(self, module_name: str, fn: Callable[[], object]) -> None:
        """Run fn once module_name has loaded.

        If the module is already loaded fn runs immediately. Otherwise it
        is queued; queueing the same callable twice for one module has no
        effect.

        Raises:
            InvalidModuleNameError: If module_name is not a non-empty string.
        """
        with self._lock:
            loaded = self.is_loaded(module_name)
            if not loaded:
                queue = self._pending.setdefault(module_name, [])
                if fn in queue:
                    logger.debug("After-load callback already queued", module=module_name)
                    return
                queue.append(fn)
                queued = len(queue)

        if loaded:
            fn()
            return

        logger.debug("After-load callback queued", module=module_name, queued=queued)

    def provide(self, module_name: str) -> None:
        """Mark a module as loaded and run its queued callbacks in order.

        An exception from a callback propagates; callbacks queued after it
        are dropped along with the rest of the queue.
        """
        _check_module_name(module_name)
        with self._lock:
            self._provided.add(module_name)
            queue = self._pending.pop(module_name, [])

        if queue:
            logger.debug("Module provided", module=module_name, callbacks=len(queue))

        for fn in queue:
            fn()

    def forget(self, module_name: str) -> None:
        """Mark a module as no longer provided."""
        _check_module_name(module_name)
        with self._lock:
            self._provided.discard(module_name)

    def cancel(self, module_name: str, fn: Callable[[], object]) -> bool:
        """Remove a queued callback.

        Returns:
            True if fn was queued for module_name, False otherwise.
        """
        _check_module_name(module_name)
        with self._lock:
            queue = self._pending.get(module_name)
            if not queue or fn not in queue:
                return False
            queue.remove(fn)
            if not queue:
                del self._pending[module_name]
        return True

    def pending(self, module_name: str) -> list[Callable[[], object]]:
        """Get the callbacks queued for a module."""
        with self._lock:
            return list(self._pending.get(module_name, []))

    def watched_modules(self) -> set[str]:
        """Get the names of modules with queued callbacks."""
        with self._lock:
            return set(self._pending)


def _check_module_name(module_name: object) -> None:
    if not isinstance(module_name, str) or not module_name:
        raise InvalidModuleNameError(module_name)
