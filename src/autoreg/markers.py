from __future__ import annotations

from dataclasses import dataclass

from autoreg.descriptors import MarkerArguments, MarkerValue, ValueKind
from autoreg.exceptions import AutoregInvalidMarkerError
from autoreg.lifetime import DEFAULT_LIFETIME

REGISTER_SERVICE_MARKER = "Autoreg.Attributes.RegisterServiceAttribute"
"""Marks a class for automatic registration."""

REGISTER_INTERFACE_MARKER = "Autoreg.Attributes.RegisterInterfaceAttribute"
"""Marks an interface as an eligible inferred binding target."""

DEPENDENCY_REGISTRATION_MARKER = "Autoreg.Attributes.DependencyRegistrationAttribute"
"""Marks a partial method as a registration entry point."""

SERVICE_LIFETIME_TYPE = "Microsoft.Extensions.DependencyInjection.ServiceLifetime"
SERVICE_COLLECTION_TYPE = "Microsoft.Extensions.DependencyInjection.IServiceCollection"

LIFETIME_ARGUMENT = "ServiceLifetime"
INTERFACE_ARGUMENT = "InterfaceType"
KEY_ARGUMENT = "ServiceKey"

_POSITIONAL_LIFETIME = 0
_POSITIONAL_KEY = 1
_POSITIONAL_INTERFACE = 2
_MAX_POSITIONAL_ARGUMENTS = 3


@dataclass(frozen=True, slots=True)
class MarkerData:
    """Registration configuration carried by one registration marker."""

    lifetime_code: int = int(DEFAULT_LIFETIME)
    """Raw lifetime code; codes outside the known lifetimes are kept as given."""
    interface_name: str | None = None
    """Explicitly bound interface, used verbatim when present."""
    key: str | None = None
    """Registration key; its presence selects keyed registration."""


def parse_marker_data(arguments: MarkerArguments) -> MarkerData:
    """Parse registration marker arguments into ``MarkerData``.

    Supported constructor shapes are ``(lifetime)`` and
    ``(lifetime, key, interface)``. Named ``ServiceLifetime`` only applies
    when no positional lifetime was given; named ``InterfaceType`` and
    ``ServiceKey`` override positional values. Unknown named arguments are
    ignored.

    Args:
        arguments: Arguments bound by the host for one marker instance.

    Raises:
        AutoregInvalidMarkerError: If any argument fails to resolve to its expected shape.

    """
    positional = arguments.positional
    if len(positional) > _MAX_POSITIONAL_ARGUMENTS:
        msg = (
            f"Expected at most {_MAX_POSITIONAL_ARGUMENTS} positional arguments, "
            f"got {len(positional)}."
        )
        raise AutoregInvalidMarkerError(msg)

    lifetime_code: int | None = None
    interface_name: str | None = None
    key: str | None = None

    if len(positional) > _POSITIONAL_LIFETIME:
        lifetime_code = _parse_lifetime(positional[_POSITIONAL_LIFETIME], argument="lifetime")
    if len(positional) > _POSITIONAL_KEY:
        key = _parse_key(positional[_POSITIONAL_KEY], argument="key")
    if len(positional) > _POSITIONAL_INTERFACE:
        interface_name = _parse_interface(positional[_POSITIONAL_INTERFACE], argument="interface")

    for name, value in arguments.named:
        if value.kind is ValueKind.ERROR:
            msg = f"Named argument '{name}' could not be bound."
            raise AutoregInvalidMarkerError(msg)
        if name == LIFETIME_ARGUMENT:
            if lifetime_code is None:
                lifetime_code = _parse_lifetime(value, argument=name)
        elif name == INTERFACE_ARGUMENT:
            interface_name = _parse_interface(value, argument=name)
        elif name == KEY_ARGUMENT:
            key = _parse_key(value, argument=name)

    return MarkerData(
        lifetime_code=int(DEFAULT_LIFETIME) if lifetime_code is None else lifetime_code,
        interface_name=interface_name,
        key=key,
    )


def _parse_lifetime(value: MarkerValue, *, argument: str) -> int:
    if value.kind in (ValueKind.ENUM, ValueKind.PRIMITIVE) and _is_int(value.value):
        return int(value.value)
    msg = f"Argument '{argument}' does not resolve to an integer-backed lifetime: {value.value!r}."
    raise AutoregInvalidMarkerError(msg)


def _parse_interface(value: MarkerValue, *, argument: str) -> str | None:
    if value.kind is ValueKind.NULL:
        return None
    if value.kind is ValueKind.TYPE and isinstance(value.value, str) and value.value:
        return value.value
    msg = f"Argument '{argument}' does not resolve to a type: {value.value!r}."
    raise AutoregInvalidMarkerError(msg)


def _parse_key(value: MarkerValue, *, argument: str) -> str | None:
    if value.kind is ValueKind.NULL:
        return None
    if value.kind is ValueKind.PRIMITIVE and isinstance(value.value, str):
        # An empty key registers without a key.
        return value.value or None
    msg = f"Argument '{argument}' does not resolve to a string: {value.value!r}."
    raise AutoregInvalidMarkerError(msg)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


__all__ = [
    "DEPENDENCY_REGISTRATION_MARKER",
    "INTERFACE_ARGUMENT",
    "KEY_ARGUMENT",
    "LIFETIME_ARGUMENT",
    "REGISTER_INTERFACE_MARKER",
    "REGISTER_SERVICE_MARKER",
    "SERVICE_COLLECTION_TYPE",
    "SERVICE_LIFETIME_TYPE",
    "MarkerData",
    "parse_marker_data",
]
