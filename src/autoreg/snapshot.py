"""Load a JSON snapshot of the host type model.

A snapshot is what a host exporter writes out so the generator can run
outside the compiler process:

.. code-block:: json

    {
        "environment": null,
        "types": [
            {
                "name": "global::Sample.Service1",
                "markers": [
                    {"name": "Autoreg.Attributes.RegisterServiceAttribute", "arguments": [1]}
                ],
                "interfaces": ["global::Sample.ITestService"]
            }
        ],
        "entry_points": [
            {
                "containing_type": {"name": "Startup", "namespace": "Sample", "modifiers": ["static"]},
                "method_name": "AddServices",
                "modifiers": ["public", "static", "partial"],
                "parameters": [
                    {
                        "name": "services",
                        "type": {"name": "Microsoft.Extensions.DependencyInjection.IServiceCollection"}
                    }
                ]
            }
        ]
    }

Marker values are bare JSON scalars (``1``, ``"key"``, ``null``) or explicit
``{"kind": "type", "value": "global::Sample.IService"}`` objects.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError

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
    TypeReference,
    ValueKind,
)
from autoreg.exceptions import AutoregInvalidSnapshotError
from autoreg.host import InMemorySemanticModel


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class MarkerValueModel(_SnapshotModel):
    kind: ValueKind
    value: Any = None


MarkerValueInput = Union[StrictBool, StrictInt, StrictStr, MarkerValueModel, None]


class MarkerModel(_SnapshotModel):
    name: str
    arguments: list[MarkerValueInput] = Field(default_factory=list)
    named: dict[str, MarkerValueInput] = Field(default_factory=dict)

    def to_descriptor(self) -> MarkerInstance:
        return MarkerInstance(
            name=self.name,
            arguments=MarkerArguments(
                positional=tuple(_to_marker_value(value) for value in self.arguments),
                named=tuple((key, _to_marker_value(value)) for key, value in self.named.items()),
            ),
        )


class TypeModel(_SnapshotModel):
    name: str
    markers: list[MarkerModel] = Field(default_factory=list)
    interfaces: list[str] = Field(default_factory=list)

    def to_descriptor(self) -> TypeDescriptor:
        return TypeDescriptor(
            name=self.name,
            markers=tuple(marker.to_descriptor() for marker in self.markers),
            interfaces=tuple(self.interfaces),
        )


class TypeReferenceModel(_SnapshotModel):
    name: str
    nullable: bool = False

    def to_descriptor(self) -> TypeReference:
        return TypeReference(name=self.name, nullable=self.nullable)


class ContainingTypeModel(_SnapshotModel):
    name: str
    namespace: str = ""
    kind: str = "class"
    accessibility: Accessibility = Accessibility.PUBLIC
    modifiers: list[str] = Field(default_factory=list)

    def to_descriptor(self) -> ContainingTypeDescriptor:
        return ContainingTypeDescriptor(
            name=self.name,
            namespace=self.namespace,
            kind=self.kind,
            accessibility=self.accessibility,
            modifiers=tuple(self.modifiers),
        )


class ParameterModel(_SnapshotModel):
    name: str
    type: TypeReferenceModel
    modifiers: list[str] = Field(default_factory=list)
    default_value: str | None = None

    def to_descriptor(self) -> ParameterDescriptor:
        return ParameterDescriptor(
            name=self.name,
            type=self.type.to_descriptor(),
            modifiers=tuple(self.modifiers),
            default_value=self.default_value,
        )


class EntryPointModel(_SnapshotModel):
    containing_type: ContainingTypeModel
    method_name: str
    modifiers: list[str] = Field(default_factory=list)
    parameters: list[ParameterModel] = Field(default_factory=list)
    return_type: TypeReferenceModel | None = None

    def to_descriptor(self) -> EntryPointDescriptor:
        return EntryPointDescriptor(
            containing_type=self.containing_type.to_descriptor(),
            method_name=self.method_name,
            parameters=tuple(parameter.to_descriptor() for parameter in self.parameters),
            return_type=None if self.return_type is None else self.return_type.to_descriptor(),
            modifiers=tuple(self.modifiers),
        )


class SnapshotModel(_SnapshotModel):
    """Root document of a host model snapshot."""

    environment: list[str] | None = None
    """Well-known types present in the compilation; ``null`` means all of them."""
    types: list[TypeModel] = Field(default_factory=list)
    entry_points: list[EntryPointModel] = Field(default_factory=list)

    def to_semantic_model(self) -> InMemorySemanticModel:
        environment = CompilationEnvironment(
            known_types=None if self.environment is None else frozenset(self.environment),
        )
        return InMemorySemanticModel(
            types=[model.to_descriptor() for model in self.types],
            entry_points=[model.to_descriptor() for model in self.entry_points],
            environment=environment,
        )


def parse_snapshot(data: str | bytes) -> InMemorySemanticModel:
    """Parse snapshot JSON into an in-memory semantic model.

    Args:
        data: JSON document text.

    Raises:
        AutoregInvalidSnapshotError: If the document is not valid snapshot JSON.

    """
    try:
        snapshot = SnapshotModel.model_validate_json(data)
    except ValidationError as error:
        msg = f"Invalid snapshot: {error}"
        raise AutoregInvalidSnapshotError(msg) from error
    return snapshot.to_semantic_model()


def load_snapshot(path: Path) -> InMemorySemanticModel:
    """Read and parse the snapshot file at ``path``.

    Raises:
        AutoregInvalidSnapshotError: If the file cannot be read or parsed.

    """
    try:
        data = path.read_bytes()
    except OSError as error:
        msg = f"Cannot read snapshot {path}: {error}"
        raise AutoregInvalidSnapshotError(msg) from error
    return parse_snapshot(data)


def _to_marker_value(value: MarkerValueInput) -> MarkerValue:
    if value is None:
        return MarkerValue.null()
    if isinstance(value, MarkerValueModel):
        return MarkerValue(kind=value.kind, value=value.value)
    return MarkerValue.primitive(value)


__all__ = ["SnapshotModel", "load_snapshot", "parse_snapshot"]
