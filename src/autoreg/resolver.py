from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from autoreg.cancellation import NONE, CancellationToken
from autoreg.config import GeneratorSettings
from autoreg.descriptors import (
    CompilationEnvironment,
    TypeDescriptor,
    TypeGraph,
    canonical_type_name,
)
from autoreg.diagnostics import (
    MALFORMED_MARKER,
    UNKNOWN_LIFETIME,
    Diagnostic,
    DiagnosticReporter,
    ignore_diagnostic,
)
from autoreg.exceptions import AutoregInvalidMarkerError
from autoreg.lifetime import DEFAULT_LIFETIME, Lifetime
from autoreg.markers import MarkerData, parse_marker_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RegistrationRecord:
    """Normalized registration of one concrete type."""

    service_name: str
    """Canonical name of the concrete type."""
    bound_interface_name: str = ""
    """Canonical name of the interface to register as; empty registers the service as itself."""
    lifetime: Lifetime = DEFAULT_LIFETIME
    key: str | None = None
    """Registration key; its presence selects the keyed registration variant."""

    @property
    def registers_as_self(self) -> bool:
        return not self.bound_interface_name

    @property
    def is_keyed(self) -> bool:
        return self.key is not None


class RegistrationResolver:
    """Turns declared types and their markers into ordered registration records.

    Resolution is a pure function of its inputs: records come out in the order
    their types were first accepted, and running it twice on the same input
    gives the same list.
    """

    def __init__(
        self,
        *,
        graph: TypeGraph | None = None,
        settings: GeneratorSettings | None = None,
        environment: CompilationEnvironment | None = None,
        report_diagnostic: DiagnosticReporter = ignore_diagnostic,
        cancellation_token: CancellationToken = NONE,
    ) -> None:
        self._graph = graph
        self._settings = settings if settings is not None else GeneratorSettings()
        self._environment = environment if environment is not None else CompilationEnvironment()
        self._report_diagnostic = report_diagnostic
        self._cancellation_token = cancellation_token

    def resolve(self, types: Iterable[TypeDescriptor]) -> list[RegistrationRecord]:
        """Resolve registration records for ``types``.

        Args:
            types: Declared types in discovery order. Interface descriptors may
                be included; they are used for the interface search only.

        Raises:
            AutoregOperationCancelledError: If the cancellation token fires between types.

        """
        if not self._is_environment_available():
            logger.debug("Registration metadata types are unavailable; nothing to resolve")
            return []

        declared = tuple(types)
        graph = self._build_graph(declared)
        records: list[RegistrationRecord] = []
        recorded_names: set[str] = set()
        for descriptor in declared:
            self._cancellation_token.raise_if_cancellation_requested()
            name = canonical_type_name(descriptor.name)
            if name in recorded_names:
                logger.debug("Skipping duplicate declaration of %s", descriptor.name)
                continue
            record = self._resolve_type(descriptor=descriptor, graph=graph)
            if record is None:
                continue
            recorded_names.add(name)
            records.append(record)

        logger.info(
            "Resolved %d registration record(s) from %d declared type(s)",
            len(records),
            len(declared),
        )
        return records

    def find_eligible_interface(self, descriptor: TypeDescriptor, graph: TypeGraph) -> str | None:
        """Return the first interface of ``descriptor`` carrying the eligibility marker.

        The walk is depth-first in declaration order: each interface is checked
        before its own interfaces, and those before the next sibling. Every
        canonical name is visited once, so diamonds and cycles terminate.

        Args:
            descriptor: Type whose interfaces are searched.
            graph: Arena used to resolve interface names.

        """
        interface_marker = self._settings.interface_marker
        for interface in _walk_interfaces(descriptor=descriptor, graph=graph):
            if interface.has_marker(interface_marker):
                return interface.name
        return None

    def _resolve_type(
        self,
        *,
        descriptor: TypeDescriptor,
        graph: TypeGraph,
    ) -> RegistrationRecord | None:
        marker = descriptor.find_marker(self._settings.registration_marker)
        if marker is None:
            return None

        try:
            data = parse_marker_data(marker.arguments)
        except AutoregInvalidMarkerError as error:
            logger.warning("Skipping %s: malformed registration marker: %s", descriptor.name, error)
            self._report_diagnostic(
                Diagnostic.create(MALFORMED_MARKER, subject=descriptor.name, message=str(error)),
            )
            return None

        lifetime = self._resolve_lifetime(descriptor=descriptor, data=data)
        interface_name = data.interface_name
        if interface_name is None:
            interface_name = self.find_eligible_interface(descriptor, graph) or ""
            logger.debug(
                "Inferred binding for %s: %s",
                descriptor.name,
                interface_name or "<self>",
            )
        else:
            logger.debug("Explicit binding for %s: %s", descriptor.name, interface_name)

        return RegistrationRecord(
            service_name=descriptor.name,
            bound_interface_name=interface_name,
            lifetime=lifetime,
            key=data.key,
        )

    def _resolve_lifetime(self, *, descriptor: TypeDescriptor, data: MarkerData) -> Lifetime:
        if not Lifetime.is_known_code(data.lifetime_code):
            self._report_diagnostic(
                Diagnostic.create(
                    UNKNOWN_LIFETIME,
                    subject=descriptor.name,
                    message=f"Lifetime code {data.lifetime_code} is not a known lifetime.",
                ),
            )
        return Lifetime.from_code(data.lifetime_code)

    def _build_graph(self, declared: tuple[TypeDescriptor, ...]) -> TypeGraph:
        if self._graph is None:
            return TypeGraph(declared)
        return TypeGraph([*self._graph, *declared])

    def _is_environment_available(self) -> bool:
        return all(
            self._environment.has_type(name)
            for name in (
                self._settings.registration_marker,
                self._settings.interface_marker,
                self._settings.lifetime_type,
            )
        )


def _walk_interfaces(*, descriptor: TypeDescriptor, graph: TypeGraph) -> Iterator[TypeDescriptor]:
    visited = {canonical_type_name(descriptor.name)}
    stack = [iter(graph.interfaces_of(descriptor))]
    while stack:
        interface = next(stack[-1], None)
        if interface is None:
            stack.pop()
            continue
        name = canonical_type_name(interface.name)
        if name in visited:
            continue
        visited.add(name)
        yield interface
        stack.append(iter(graph.interfaces_of(interface)))


def resolve_registrations(
    types: Iterable[TypeDescriptor],
    *,
    graph: TypeGraph | None = None,
    settings: GeneratorSettings | None = None,
    environment: CompilationEnvironment | None = None,
    report_diagnostic: DiagnosticReporter = ignore_diagnostic,
    cancellation_token: CancellationToken = NONE,
) -> list[RegistrationRecord]:
    """Resolve registration records for ``types`` with a one-off resolver."""
    return RegistrationResolver(
        graph=graph,
        settings=settings,
        environment=environment,
        report_diagnostic=report_diagnostic,
        cancellation_token=cancellation_token,
    ).resolve(types)


__all__ = ["RegistrationRecord", "RegistrationResolver", "resolve_registrations"]
