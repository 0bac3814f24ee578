from __future__ import annotations

import pytest

from autoreg.descriptors import MarkerArguments, MarkerValue
from autoreg.exceptions import AutoregInvalidMarkerError
from autoreg.lifetime import Lifetime
from autoreg.markers import MarkerData, parse_marker_data


def test_marker_without_arguments_defaults_to_scoped() -> None:
    data = parse_marker_data(MarkerArguments())

    assert data == MarkerData(lifetime_code=Lifetime.SCOPED, interface_name=None, key=None)


def test_positional_enum_lifetime_is_used() -> None:
    data = parse_marker_data(MarkerArguments(positional=(MarkerValue.enum(2),)))

    assert data.lifetime_code == Lifetime.TRANSIENT


def test_positional_primitive_integer_lifetime_is_used() -> None:
    data = parse_marker_data(MarkerArguments(positional=(MarkerValue.primitive(0),)))

    assert data.lifetime_code == Lifetime.SINGLETON


def test_three_positional_arguments_carry_lifetime_key_and_interface() -> None:
    data = parse_marker_data(
        MarkerArguments(
            positional=(
                MarkerValue.enum(0),
                MarkerValue.primitive("primary"),
                MarkerValue.type_ref("global::Sample.IStore"),
            ),
        ),
    )

    assert data == MarkerData(
        lifetime_code=0,
        interface_name="global::Sample.IStore",
        key="primary",
    )


def test_named_arguments_set_key_and_interface() -> None:
    data = parse_marker_data(
        MarkerArguments.from_mapping(
            positional=[MarkerValue.enum(1)],
            named={
                "ServiceKey": MarkerValue.primitive("k"),
                "InterfaceType": MarkerValue.type_ref("IFoo"),
            },
        ),
    )

    assert data.key == "k"
    assert data.interface_name == "IFoo"


def test_named_lifetime_applies_only_without_positional_lifetime() -> None:
    named_only = parse_marker_data(
        MarkerArguments.from_mapping(named={"ServiceLifetime": MarkerValue.enum(2)}),
    )
    both = parse_marker_data(
        MarkerArguments.from_mapping(
            positional=[MarkerValue.enum(0)],
            named={"ServiceLifetime": MarkerValue.enum(2)},
        ),
    )

    assert named_only.lifetime_code == Lifetime.TRANSIENT
    assert both.lifetime_code == Lifetime.SINGLETON


def test_unknown_lifetime_code_is_kept_verbatim() -> None:
    data = parse_marker_data(MarkerArguments(positional=(MarkerValue.enum(7),)))

    assert data.lifetime_code == 7


def test_null_key_and_interface_mean_absent() -> None:
    data = parse_marker_data(
        MarkerArguments.from_mapping(
            named={"ServiceKey": MarkerValue.null(), "InterfaceType": MarkerValue.null()},
        ),
    )

    assert data.key is None
    assert data.interface_name is None


def test_empty_key_registers_without_key() -> None:
    data = parse_marker_data(
        MarkerArguments.from_mapping(named={"ServiceKey": MarkerValue.primitive("")}),
    )

    assert data.key is None


def test_unknown_named_arguments_are_ignored() -> None:
    data = parse_marker_data(
        MarkerArguments.from_mapping(named={"Comment": MarkerValue.primitive(3.5)}),
    )

    assert data == MarkerData()


@pytest.mark.parametrize(
    ("arguments", "match"),
    [
        (
            MarkerArguments(positional=(MarkerValue.primitive("Scoped"),)),
            "integer-backed lifetime",
        ),
        (
            MarkerArguments(positional=(MarkerValue.primitive(True),)),
            "integer-backed lifetime",
        ),
        (
            MarkerArguments(positional=(MarkerValue.null(),)),
            "integer-backed lifetime",
        ),
        (
            MarkerArguments(positional=(MarkerValue.error(),)),
            "integer-backed lifetime",
        ),
        (
            MarkerArguments.from_mapping(named={"ServiceLifetime": MarkerValue.primitive("x")}),
            "integer-backed lifetime",
        ),
        (
            MarkerArguments.from_mapping(named={"InterfaceType": MarkerValue.primitive("IFoo")}),
            "does not resolve to a type",
        ),
        (
            MarkerArguments.from_mapping(named={"ServiceKey": MarkerValue.primitive(5)}),
            "does not resolve to a string",
        ),
        (
            MarkerArguments.from_mapping(named={"Anything": MarkerValue.error()}),
            "could not be bound",
        ),
        (
            MarkerArguments(positional=(MarkerValue.enum(1),) * 4),
            "at most 3 positional arguments",
        ),
    ],
)
def test_malformed_arguments_raise(arguments: MarkerArguments, match: str) -> None:
    with pytest.raises(AutoregInvalidMarkerError, match=match):
        parse_marker_data(arguments)
