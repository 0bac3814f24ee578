from autoreg.cancellation import CancellationToken
from autoreg.config import GeneratorSettings
from autoreg.descriptors import (
    Accessibility,
    CompilationEnvironment,
    ContainingTypeDescriptor,
    EntryPointDescriptor,
    MarkerArguments,
    MarkerInstance,
    MarkerValue,
    ParameterDescriptor,
    TypeDescriptor,
    TypeGraph,
    TypeReference,
    ValueKind,
)
from autoreg.diagnostics import Diagnostic, DiagnosticBag, DiagnosticSeverity
from autoreg.exceptions import (
    AutoregDuplicateArtifactError,
    AutoregError,
    AutoregInvalidMarkerError,
    AutoregInvalidSnapshotError,
    AutoregOperationCancelledError,
)
from autoreg.generator import GenerationResult, RegistrationGenerator
from autoreg.host import (
    ArtifactSink,
    DirectoryArtifactSink,
    InMemoryArtifactSink,
    InMemorySemanticModel,
    SemanticModel,
)
from autoreg.lifetime import Lifetime
from autoreg.resolver import RegistrationRecord, RegistrationResolver, resolve_registrations
from autoreg.snapshot import load_snapshot, parse_snapshot
from autoreg.synthesizer import (
    GeneratedArtifact,
    RegistrationSynthesizer,
    synthesize_registrations,
)

__all__ = [
    "Accessibility",
    "ArtifactSink",
    "AutoregDuplicateArtifactError",
    "AutoregError",
    "AutoregInvalidMarkerError",
    "AutoregInvalidSnapshotError",
    "AutoregOperationCancelledError",
    "CancellationToken",
    "CompilationEnvironment",
    "ContainingTypeDescriptor",
    "Diagnostic",
    "DiagnosticBag",
    "DiagnosticSeverity",
    "DirectoryArtifactSink",
    "EntryPointDescriptor",
    "GeneratedArtifact",
    "GenerationResult",
    "GeneratorSettings",
    "InMemoryArtifactSink",
    "InMemorySemanticModel",
    "Lifetime",
    "MarkerArguments",
    "MarkerInstance",
    "MarkerValue",
    "ParameterDescriptor",
    "RegistrationGenerator",
    "RegistrationRecord",
    "RegistrationResolver",
    "RegistrationSynthesizer",
    "SemanticModel",
    "TypeDescriptor",
    "TypeGraph",
    "TypeReference",
    "ValueKind",
    "load_snapshot",
    "parse_snapshot",
    "resolve_registrations",
    "synthesize_registrations",
]
