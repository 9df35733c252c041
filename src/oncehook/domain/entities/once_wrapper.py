"""One-shot wrapper entity.

Contains the callable that the once helpers hand to the hook and load
registries in place of the user's callback:
- WrapperState: the states a wrapper moves through
- OnceWrapper: the self-detaching callable itself
"""

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class WrapperState(str, Enum):
    """Lifecycle state of a OnceWrapper."""

    ARMED = "armed"
    FIRED = "fired"
    DISCARDED = "discarded"


@dataclass(eq=False)
class OnceWrapper:
    """Callable that forwards to a callback at most once per arming.

    The first call moves the wrapper from ARMED to FIRED, runs ``detach``
    so the wrapper is gone from its host before the callback runs, and
    then forwards the call. Calls made while FIRED or DISCARDED do nothing
    and return None. Wrappers compare and hash by identity, so a registry
    holding a wrapper treats it as one distinct listener.

    Attributes:
        id: Registry id (generated name or sequential name).
        target: Event name or module name the wrapper is registered for.
        callback: The user callback.
        scope: Hook scope, None for global hooks and for module loads.
        stacking: Whether the wrapper was created by a stacking helper.
        state: Current lifecycle state.
        detach: Called with the wrapper when it fires or is discarded; the
            wrapper's state tells the two apart.

    Example:
        wrapper = OnceWrapper(id="once#1", target="after_save", callback=notify)
        wrapper("doc")  # calls notify("doc")
        wrapper("doc")  # no-op
    """

    id: str
    target: str
    callback: Callable[..., Any]
    scope: Optional[Hashable] = None
    stacking: bool = False
    state: WrapperState = WrapperState.ARMED
    detach: Optional[Callable[["OnceWrapper"], None]] = field(default=None, repr=False)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if self.state is not WrapperState.ARMED:
            return None
        self.state = WrapperState.FIRED
        if self.detach is not None:
            self.detach(self)
        return self.callback(*args, **kwargs)

    @property
    def armed(self) -> bool:
        return self.state is WrapperState.ARMED

    @property
    def fired(self) -> bool:
        return self.state is WrapperState.FIRED

    def rearm(self) -> None:
        """Make a fired or discarded wrapper callable again."""
        self.state = WrapperState.ARMED

    def disarm(self) -> None:
        """Turn the wrapper into a no-op without calling the callback."""
        self.state = WrapperState.DISCARDED
