"""One-shot after-load registration.

If the module is already loaded, both helpers call the callback right away
and register nothing. Calling them again after the load calls the
callback again each time. Only registrations made before the load are
deduplicated.
"""

from typing import Any, Callable, Optional

from oncehook.core.logging import get_logger
from oncehook.core.once.context import OnceContext, get_default_context
from oncehook.domain.entities.once_wrapper import OnceWrapper

logger = get_logger(__name__)


def after_load_once(
    module_name: str,
    callback: Callable[[], Any],
    *,
    context: Optional[OnceContext] = None,
) -> Optional[str]:
    """Run callback once module_name has loaded.

    Before the load, repeated calls with the same module and callback
    share one wrapper, so callback runs exactly once when the module
    loads.

    Args:
        module_name: Dotted module name.
        callback: Zero-argument callable.
        context: OnceContext to use instead of the default one.

    Returns:
        The wrapper id, or None if callback ran immediately.

    Example:
        after_load_once("matplotlib.pyplot", use_dark_style)
    """
    context = context or get_default_context()
    loads = context.loads

    if loads.is_loaded(module_name):
        logger.debug("Module already loaded, running callback", module=module_name)
        callback()
        return None

    wrapper_id = context.name(module_name, callback)

    def detach(wrapper: OnceWrapper) -> None:
        loads.cancel(module_name, wrapper)
        logger.debug(
            "Load wrapper detached",
            wrapper_id=wrapper.id,
            module=module_name,
            state=wrapper.state.value,
        )

    wrapper = context.obtain(
        wrapper_id,
        lambda: OnceWrapper(
            id=wrapper_id,
            target=module_name,
            callback=callback,
            detach=detach,
        ),
    )

    loads.run_after_load(module_name, wrapper)
    return wrapper_id


def after_load_once_stacking(
    module_name: str,
    callback: Callable[[], Any],
    *,
    context: Optional[OnceContext] = None,
) -> Optional[str]:
    """Queue an independent callback for when module_name loads.

    Every call before the load adds a new wrapper, so N calls mean N runs
    at load time. Each wrapper drops out of the context's registry when
    it fires.

    Returns:
        The new wrapper id, or None if callback ran immediately.
    """
    context = context or get_default_context()
    loads = context.loads

    if loads.is_loaded(module_name):
        logger.debug("Module already loaded, running callback", module=module_name)
        callback()
        return None

    wrapper_id = context.next_sequential_id()

    def detach(wrapper: OnceWrapper) -> None:
        loads.cancel(module_name, wrapper)
        context.release(wrapper.id)
        logger.debug(
            "Stacking load wrapper detached",
            wrapper_id=wrapper.id,
            module=module_name,
            state=wrapper.state.value,
        )

    wrapper = OnceWrapper(
        id=wrapper_id,
        target=module_name,
        callback=callback,
        stacking=True,
        detach=detach,
    )

    context.record(wrapper)
    loads.run_after_load(module_name, wrapper)
    return wrapper_id
