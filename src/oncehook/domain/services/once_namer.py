"""Wrapper naming service.

Turns identifier tuples such as ``(event, callback, scope)`` into stable
registry ids, so that repeated registrations with the same arguments land
on the same wrapper.
"""


class OnceNamer:
    """Generate deterministic wrapper ids.

    Naming rules:
    - Strings are names and render as their own text
    - None and booleans render as their repr
    - Anything else renders as the decimal string of its hash,
      or of its id() when it is unhashable
    - Parts are joined with ':' behind a '<prefix>:' namespace tag
    - Sequential ids use '<prefix>#<n>' and never clash with generated ones

    Hash-based parts are stable within one process only: string hashing
    is salted per interpreter run, and id() values are reused once an
    object is collected.
    """

    SEPARATOR = ":"
    SEQUENCE_MARK = "#"

    def __init__(self, prefix: str = "once") -> None:
        self.prefix = prefix

    def generate(self, *parts: object) -> str:
        """Generate an id from an identifier tuple.

        Examples:
            >>> OnceNamer().generate("after_save", None)
            'once:after_save:None'
            >>> OnceNamer().generate("a:b")
            'once:a\\\\:b'
        """
        rendered = [self.render(part) for part in parts]
        return self.SEPARATOR.join([self.prefix, *rendered])

    def sequential(self, number: int) -> str:
        """Generate an id from a counter value.

        Examples:
            >>> OnceNamer().sequential(3)
            'once#3'
        """
        return f"{self.prefix}{self.SEQUENCE_MARK}{number}"

    @classmethod
    def render(cls, value: object) -> str:
        """Render a single identifier part."""
        if isinstance(value, str):
            # Escape so that ("a:b",) and ("a", "b") stay distinct
            return value.replace("\\", "\\\\").replace(cls.SEPARATOR, "\\" + cls.SEPARATOR)
        if value is None or isinstance(value, bool):
            return repr(value)
        try:
            return str(hash(value))
        except TypeError:
            return str(id(value))
