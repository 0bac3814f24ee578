from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from autoreg.markers import (
    DEPENDENCY_REGISTRATION_MARKER,
    REGISTER_INTERFACE_MARKER,
    REGISTER_SERVICE_MARKER,
    SERVICE_COLLECTION_TYPE,
    SERVICE_LIFETIME_TYPE,
)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class GeneratorSettings(BaseSettings):
    """Configuration of a generation pass.

    Values are read from ``AUTOREG_``-prefixed environment variables and can
    be overridden by keyword arguments. Instances are immutable and passed
    explicitly to the resolver, the synthesizer and the orchestrator.

    Examples:
        .. code-block:: python

            settings = GeneratorSettings(artifact_suffix=".generated.cs")
            generator = RegistrationGenerator(settings=settings)

    """

    model_config = SettingsConfigDict(env_prefix="AUTOREG_", frozen=True, extra="ignore")

    registration_marker: str = REGISTER_SERVICE_MARKER
    """Marker that flags a class for registration."""
    interface_marker: str = REGISTER_INTERFACE_MARKER
    """Marker that makes an interface an inferred binding target."""
    entry_point_marker: str = DEPENDENCY_REGISTRATION_MARKER
    """Marker that flags a method as a registration entry point."""
    lifetime_type: str = SERVICE_LIFETIME_TYPE
    container_type: str = SERVICE_COLLECTION_TYPE
    """Type of the entry-point parameter that receives the registrations."""

    usings: tuple[str, ...] = ("System", "Microsoft.Extensions.DependencyInjection")
    artifact_suffix: str = ".g.cs"
    emit_auto_generated_header: bool = True
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in _LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}"
            raise ValueError(msg)
        return normalized

    @field_validator("artifact_suffix")
    @classmethod
    def _validate_artifact_suffix(cls, value: str) -> str:
        if not value.startswith("."):
            msg = f"artifact_suffix must start with '.', got {value!r}"
            raise ValueError(msg)
        return value
