from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from autoreg.cancellation import NONE, CancellationToken
from autoreg.config import GeneratorSettings
from autoreg.descriptors import TypeDescriptor, TypeGraph
from autoreg.diagnostics import Diagnostic, DiagnosticBag
from autoreg.exceptions import AutoregOperationCancelledError
from autoreg.host import ArtifactSink, SemanticModel
from autoreg.resolver import RegistrationRecord, RegistrationResolver
from autoreg.synthesis.planner import plan_artifact_names
from autoreg.synthesizer import GeneratedArtifact, RegistrationSynthesizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of one generation pass."""

    records: tuple[RegistrationRecord, ...]
    artifacts: tuple[GeneratedArtifact, ...]
    """Artifacts emitted before the pass finished or was cancelled."""
    diagnostics: tuple[Diagnostic, ...]
    cancelled: bool = False


class RegistrationGenerator:
    """Runs one resolve-then-synthesize pass against a host model.

    Every call to ``run`` starts from scratch; nothing is cached between
    passes, so the generator can be re-invoked for incremental builds and
    shared between threads.

    Examples:
        .. code-block:: python

            sink = InMemoryArtifactSink()
            result = RegistrationGenerator().run(model, sink)
            for name in sink:
                print(name)

    """

    def __init__(self, *, settings: GeneratorSettings | None = None) -> None:
        self._settings = settings if settings is not None else GeneratorSettings()

    @property
    def settings(self) -> GeneratorSettings:
        return self._settings

    def run(
        self,
        model: SemanticModel,
        sink: ArtifactSink,
        *,
        cancellation_token: CancellationToken = NONE,
    ) -> GenerationResult:
        """Resolve registrations from ``model`` and emit one artifact per entry point.

        Cancellation stops the pass between types or entry points. Artifacts
        already handed to ``sink`` stay there; the entry point in progress
        emits nothing.

        Args:
            model: Host semantic model to read types and entry points from.
            sink: Receiver of finished artifacts.
            cancellation_token: Token polled between top-level items.

        """
        diagnostics = DiagnosticBag()
        records: tuple[RegistrationRecord, ...] = ()
        artifacts: list[GeneratedArtifact] = []
        try:
            records = tuple(
                self._resolve(
                    model=model,
                    diagnostics=diagnostics,
                    cancellation_token=cancellation_token,
                ),
            )
            self._synthesize(
                model=model,
                records=records,
                sink=sink,
                artifacts=artifacts,
                cancellation_token=cancellation_token,
            )
        except AutoregOperationCancelledError:
            logger.info("Generation pass cancelled after %d artifact(s)", len(artifacts))
            return GenerationResult(
                records=records,
                artifacts=tuple(artifacts),
                diagnostics=diagnostics.to_tuple(),
                cancelled=True,
            )

        logger.info(
            "Generation pass finished: %d record(s), %d artifact(s), %d diagnostic(s)",
            len(records),
            len(artifacts),
            len(diagnostics),
        )
        return GenerationResult(
            records=records,
            artifacts=tuple(artifacts),
            diagnostics=diagnostics.to_tuple(),
        )

    def _resolve(
        self,
        *,
        model: SemanticModel,
        diagnostics: DiagnosticBag,
        cancellation_token: CancellationToken,
    ) -> list[RegistrationRecord]:
        marker_name = self._settings.registration_marker
        types = [
            self._bind_registration_marker(model=model, descriptor=descriptor)
            for descriptor in model.enumerate_marked_types(marker_name)
        ]
        graph = TypeGraph.materialize(types, model.get_transitive_interfaces)
        resolver = RegistrationResolver(
            graph=graph,
            settings=self._settings,
            environment=model.environment,
            report_diagnostic=diagnostics.report,
            cancellation_token=cancellation_token,
        )
        return resolver.resolve(types)

    def _bind_registration_marker(
        self,
        *,
        model: SemanticModel,
        descriptor: TypeDescriptor,
    ) -> TypeDescriptor:
        marker_name = self._settings.registration_marker
        marker = descriptor.find_marker(marker_name)
        arguments = model.get_marker_arguments(descriptor, marker_name)
        if marker is None or arguments is None or arguments == marker.arguments:
            return descriptor
        bound = replace(marker, arguments=arguments)
        return replace(
            descriptor,
            markers=tuple(bound if item is marker else item for item in descriptor.markers),
        )

    def _synthesize(
        self,
        *,
        model: SemanticModel,
        records: Sequence[RegistrationRecord],
        sink: ArtifactSink,
        artifacts: list[GeneratedArtifact],
        cancellation_token: CancellationToken,
    ) -> None:
        if not model.environment.has_type(self._settings.entry_point_marker):
            logger.debug("Entry-point marker %s is unavailable", self._settings.entry_point_marker)
            return

        entry_points = model.enumerate_marked_methods(self._settings.entry_point_marker)
        names = plan_artifact_names(entry_points, suffix=self._settings.artifact_suffix)
        synthesizer = RegistrationSynthesizer(
            settings=self._settings,
            environment=model.environment,
            cancellation_token=cancellation_token,
        )
        for entry_point, name in zip(entry_points, names):
            artifact = synthesizer.synthesize_into(entry_point, records, sink, artifact_name=name)
            if artifact is not None:
                artifacts.append(artifact)


__all__ = ["GenerationResult", "RegistrationGenerator"]
