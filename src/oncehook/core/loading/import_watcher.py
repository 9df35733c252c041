"""Import watcher - feeds Python imports into a LoadRegistry.

The watcher sits at the front of ``sys.meta_path``. For every import it finds
the spec with the remaining finders and wraps the loader, so the registry is
told once the module body has executed. Callbacks registered while the body
is still running (circular imports, a submodule naming its parent) are
therefore picked up too.
"""

import sys
from collections.abc import Sequence
from importlib.machinery import ModuleSpec
from types import ModuleType
from typing import Any, Callable, Optional

from oncehook.core.loading.load_registry import LoadRegistry
from oncehook.core.logging import get_logger

logger = get_logger(__name__)


class _NotifyingLoader:
    """Delegate to a real loader and report successful execution."""

    def __init__(self, loader: Any, on_loaded: Callable[[str], None]) -> None:
        self._loader = loader
        self._on_loaded = on_loaded

    def create_module(self, spec: ModuleSpec) -> Optional[ModuleType]:
        return self._loader.create_module(spec)

    def exec_module(self, module: ModuleType) -> None:
        self._loader.exec_module(module)
        self._on_loaded(module.__spec__.name if module.__spec__ else module.__name__)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._loader, name)


class ImportWatcher:
    """Meta path finder that calls ``LoadRegistry.provide`` after imports.

    Example:
        loads = LoadRegistry()
        watcher = ImportWatcher(loads)
        watcher.install()

        loads.run_after_load("json", lambda: print("json is here"))
        import json  # prints, unless json was already imported
    """

    def __init__(self, loads: LoadRegistry) -> None:
        self.loads = loads
        self._searching: set[str] = set()

    @property
    def installed(self) -> bool:
        return self in sys.meta_path

    def install(self) -> None:
        """Put the watcher at the front of sys.meta_path."""
        if not self.installed:
            sys.meta_path.insert(0, self)
            logger.debug("Import watcher installed")

    def uninstall(self) -> None:
        """Remove the watcher from sys.meta_path."""
        if self.installed:
            sys.meta_path.remove(self)
            logger.debug("Import watcher uninstalled")

    def find_spec(
        self,
        fullname: str,
        path: Optional[Sequence[str]],
        target: Optional[ModuleType] = None,
    ) -> Optional[ModuleSpec]:
        if fullname in self._searching:
            return None

        self._searching.add(fullname)
        try:
            spec = self._find_with_others(fullname, path, target)
        finally:
            self._searching.discard(fullname)

        if spec is None or spec.loader is None or not hasattr(spec.loader, "exec_module"):
            return spec

        spec.loader = _NotifyingLoader(spec.loader, self.loads.provide)
        return spec

    def _find_with_others(
        self,
        fullname: str,
        path: Optional[Sequence[str]],
        target: Optional[ModuleType],
    ) -> Optional[ModuleSpec]:
        for finder in list(sys.meta_path):
            if finder is self:
                continue
            find_spec = getattr(finder, "find_spec", None)
            if find_spec is None:
                continue
            spec = find_spec(fullname, path, target)
            if spec is not None:
                return spec
        return None

    def invalidate_caches(self) -> None:
        """Nothing to invalidate; the watcher keeps no cache of its own."""
