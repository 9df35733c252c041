"""Domain services for oncehook.

Services contain logic that doesn't naturally fit within a single entity.
They have no dependencies on the hook or load registries.
"""

from oncehook.domain.services.once_namer import OnceNamer

__all__ = [
    "OnceNamer",
]
