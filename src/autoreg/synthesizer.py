from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from autoreg.cancellation import NONE, CancellationToken
from autoreg.config import GeneratorSettings
from autoreg.descriptors import CompilationEnvironment, EntryPointDescriptor
from autoreg.host import ArtifactSink
from autoreg.resolver import RegistrationRecord
from autoreg.synthesis.planner import EntryPointPlanner
from autoreg.synthesis.renderer import RegistrationTemplateRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    """A named text unit handed to the build environment."""

    name: str
    text: str


class RegistrationSynthesizer:
    """Synthesizes registration entry-point bodies from resolved records.

    For identical ``(entry_point, records)`` input the produced text is
    byte-identical, so build systems can use it as a cache key.
    """

    def __init__(
        self,
        *,
        settings: GeneratorSettings | None = None,
        environment: CompilationEnvironment | None = None,
        cancellation_token: CancellationToken = NONE,
    ) -> None:
        self._settings = settings if settings is not None else GeneratorSettings()
        self._environment = environment if environment is not None else CompilationEnvironment()
        self._cancellation_token = cancellation_token
        self._planner = EntryPointPlanner(settings=self._settings)
        self._renderer = RegistrationTemplateRenderer(settings=self._settings)

    def synthesize(
        self,
        entry_point: EntryPointDescriptor,
        records: Sequence[RegistrationRecord],
        *,
        artifact_name: str | None = None,
    ) -> GeneratedArtifact | None:
        """Build the artifact for one entry point.

        Returns ``None`` when the container type is unavailable or the entry
        point has no container parameter.

        Args:
            entry_point: Method that receives the registration body.
            records: Registration records in resolver order.
            artifact_name: Name to emit under; defaults to the declaring type
                name plus the configured suffix.

        Raises:
            AutoregOperationCancelledError: If the cancellation token has fired.

        """
        self._cancellation_token.raise_if_cancellation_requested()
        if not self._environment.has_type(self._settings.container_type):
            logger.debug("Container type %s is unavailable", self._settings.container_type)
            return None

        name = artifact_name or self.default_artifact_name(entry_point)
        plan = self._planner.build(entry_point=entry_point, records=records, artifact_name=name)
        if plan is None:
            logger.debug(
                "Skipping %s.%s: no %s parameter",
                entry_point.containing_type.qualified_name,
                entry_point.method_name,
                self._settings.container_type,
            )
            return None
        return GeneratedArtifact(name=plan.artifact_name, text=self._renderer.render(plan))

    def synthesize_into(
        self,
        entry_point: EntryPointDescriptor,
        records: Sequence[RegistrationRecord],
        sink: ArtifactSink,
        *,
        artifact_name: str | None = None,
    ) -> GeneratedArtifact | None:
        """Synthesize one entry point and hand the finished text to ``sink``."""
        artifact = self.synthesize(entry_point, records, artifact_name=artifact_name)
        if artifact is not None:
            sink.emit(artifact.name, artifact.text)
        return artifact

    def default_artifact_name(self, entry_point: EntryPointDescriptor) -> str:
        return f"{entry_point.containing_type.qualified_name}{self._settings.artifact_suffix}"


def synthesize_registrations(
    entry_point: EntryPointDescriptor,
    records: Sequence[RegistrationRecord],
    *,
    settings: GeneratorSettings | None = None,
    artifact_name: str | None = None,
) -> GeneratedArtifact | None:
    """Synthesize one entry point with a one-off synthesizer."""
    return RegistrationSynthesizer(settings=settings).synthesize(
        entry_point,
        records,
        artifact_name=artifact_name,
    )


__all__ = ["GeneratedArtifact", "RegistrationSynthesizer", "synthesize_registrations"]
