"""Domain entities for oncehook."""

from oncehook.domain.entities.once_wrapper import OnceWrapper, WrapperState

__all__ = [
    "OnceWrapper",
    "WrapperState",
]
