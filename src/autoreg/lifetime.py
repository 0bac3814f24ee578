from __future__ import annotations

from enum import IntEnum


class Lifetime(IntEnum):
    """Defines the lifetime of a registered service.

    Values mirror the integer codes of the container library's
    ``ServiceLifetime`` enumeration, which is how marker arguments carry them.
    """

    SINGLETON = 0
    """A single instance is created and shared for the lifetime of the container."""

    SCOPED = 1
    """Instance is shared within a scope, different instances across scopes."""

    TRANSIENT = 2
    """A new instance is created every time the service is requested."""

    @classmethod
    def is_known_code(cls, code: int) -> bool:
        """Return whether ``code`` is one of the three lifetime codes."""
        return any(member.value == code for member in cls)

    @classmethod
    def from_code(cls, code: int) -> Lifetime:
        """Map an integer code to a lifetime, defaulting unknown codes to singleton."""
        if cls.is_known_code(code):
            return cls(code)
        return cls.SINGLETON

    @property
    def suffix(self) -> str:
        """Registration function suffix, e.g. ``Scoped`` in ``AddScoped``."""
        return self.name.capitalize()


DEFAULT_LIFETIME = Lifetime.SCOPED
