"""Exceptions raised by the hook and load registries."""

class OnceHookError(Exception):
    """Base class for all oncehook errors."""
    pass

class InvalidEventError(OnceHookError, ValueError):
    """Raised when a hook event name is not a non-empty string."""
    def __init__(self, event: object):
        self.event = event
        super().__init__(f"Invalid hook event name: {event!r}")

class InvalidModuleNameError(OnceHookError, ValueError):
    """Raised when a module name is not a non-empty string."""
    def __init__(self, module_name: object):
        self.module_name = module_name
        super().__init__(f"Invalid module name: {module_name!r}")
