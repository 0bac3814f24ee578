"""Shared pytest fixtures for autoreg tests."""

import pytest

from autoreg.config import GeneratorSettings
from autoreg.descriptors import (
    ContainingTypeDescriptor,
    EntryPointDescriptor,
    ParameterDescriptor,
    TypeReference,
)
from autoreg.markers import SERVICE_COLLECTION_TYPE


@pytest.fixture(autouse=True)
def _isolate_settings_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep AUTOREG_* variables of the developer shell out of the tests."""
    for name in [
        "AUTOREG_REGISTRATION_MARKER",
        "AUTOREG_INTERFACE_MARKER",
        "AUTOREG_ENTRY_POINT_MARKER",
        "AUTOREG_LIFETIME_TYPE",
        "AUTOREG_CONTAINER_TYPE",
        "AUTOREG_USINGS",
        "AUTOREG_ARTIFACT_SUFFIX",
        "AUTOREG_EMIT_AUTO_GENERATED_HEADER",
        "AUTOREG_LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def settings() -> GeneratorSettings:
    """Default settings."""
    return GeneratorSettings()


@pytest.fixture()
def bare_settings() -> GeneratorSettings:
    """Settings without header or usings, so rendered text is just the declaration."""
    return GeneratorSettings(emit_auto_generated_header=False, usings=())


@pytest.fixture()
def configure_entry_point() -> EntryPointDescriptor:
    """``public static partial void Configure(IServiceCollection c)`` on ``Sample.Startup``."""
    return EntryPointDescriptor(
        containing_type=ContainingTypeDescriptor(
            name="Startup",
            namespace="Sample",
            modifiers=("static",),
        ),
        method_name="Configure",
        modifiers=("public", "static", "partial"),
        parameters=(
            ParameterDescriptor(name="c", type=TypeReference(name=SERVICE_COLLECTION_TYPE)),
        ),
    )


@pytest.fixture()
def nullable_entry_point() -> EntryPointDescriptor:
    """Same as ``configure_entry_point`` with ``IServiceCollection? c``."""
    return EntryPointDescriptor(
        containing_type=ContainingTypeDescriptor(
            name="Startup",
            namespace="Sample",
            modifiers=("static",),
        ),
        method_name="Configure",
        modifiers=("public", "static", "partial"),
        parameters=(
            ParameterDescriptor(
                name="c",
                type=TypeReference(name=SERVICE_COLLECTION_TYPE, nullable=True),
            ),
        ),
    )
