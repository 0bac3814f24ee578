from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum


class DiagnosticSeverity(str, Enum):
    """Severity of a reported diagnostic. None of them stop a pass."""

    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class DiagnosticDescriptor:
    """Static description shared by every diagnostic of one kind."""

    id: str
    title: str
    severity: DiagnosticSeverity


MALFORMED_MARKER = DiagnosticDescriptor(
    id="AUTOREG001",
    title="Malformed registration marker",
    severity=DiagnosticSeverity.WARNING,
)

UNKNOWN_LIFETIME = DiagnosticDescriptor(
    id="AUTOREG002",
    title="Unknown lifetime code registered as singleton",
    severity=DiagnosticSeverity.INFO,
)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal problem found while resolving registrations."""

    id: str
    severity: DiagnosticSeverity
    message: str
    subject: str
    """Canonical name of the type the diagnostic is about."""

    @classmethod
    def create(cls, descriptor: DiagnosticDescriptor, *, subject: str, message: str) -> Diagnostic:
        return cls(
            id=descriptor.id,
            severity=descriptor.severity,
            message=message,
            subject=subject,
        )

    def __str__(self) -> str:
        return f"{self.severity.value} {self.id}: {self.subject}: {self.message}"


DiagnosticReporter = Callable[[Diagnostic], None]


class DiagnosticBag:
    """Ordered collection of diagnostics reported during one pass."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def by_id(self, diagnostic_id: str) -> list[Diagnostic]:
        return [diagnostic for diagnostic in self._diagnostics if diagnostic.id == diagnostic_id]

    def to_tuple(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)


def ignore_diagnostic(_diagnostic: Diagnostic) -> None:
    """Discard a diagnostic; used when the caller does not collect them."""
