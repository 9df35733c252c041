"""Module-availability facility.

Example usage:
    from oncehook.core.loading import ImportWatcher, LoadRegistry

    loads = LoadRegistry()
    ImportWatcher(loads).install()
    loads.run_after_load("yaml", register_yaml_representers)
"""

from oncehook.core.loading.import_watcher import ImportWatcher
from oncehook.core.loading.load_registry import LoadRegistry

__all__ = [
    "ImportWatcher",
    "LoadRegistry",
]
