from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from autoreg.descriptors import (
    CompilationEnvironment,
    EntryPointDescriptor,
    MarkerArguments,
    TypeDescriptor,
    TypeGraph,
)
from autoreg.exceptions import AutoregDuplicateArtifactError

logger = logging.getLogger(__name__)


@runtime_checkable
class SemanticModel(Protocol):
    """Read-only view of the host compiler's type model."""

    @property
    def environment(self) -> CompilationEnvironment:
        """Well-known types available in the compilation."""
        ...

    def enumerate_marked_types(self, marker_name: str) -> list[TypeDescriptor]:
        """Return declared types carrying ``marker_name``, in declaration order."""
        ...

    def enumerate_marked_methods(self, marker_name: str) -> list[EntryPointDescriptor]:
        """Return methods carrying ``marker_name``, in declaration order."""
        ...

    def get_transitive_interfaces(self, type_descriptor: TypeDescriptor) -> list[TypeDescriptor]:
        """Return every interface ``type_descriptor`` implements, declaration-ordered."""
        ...

    def get_marker_arguments(
        self,
        type_descriptor: TypeDescriptor,
        marker_name: str,
    ) -> MarkerArguments | None:
        """Return the bound arguments of ``marker_name`` on ``type_descriptor``."""
        ...


@runtime_checkable
class ArtifactSink(Protocol):
    """Receives finished artifacts from the synthesizer."""

    def emit(self, name: str, text: str) -> None:
        """Add an artifact; called at most once per name in a pass."""
        ...


class InMemorySemanticModel:
    """``SemanticModel`` over pre-materialized descriptors."""

    def __init__(
        self,
        *,
        types: Iterable[TypeDescriptor] = (),
        entry_points: Iterable[EntryPointDescriptor] = (),
        environment: CompilationEnvironment | None = None,
    ) -> None:
        self._graph = TypeGraph(types)
        self._entry_points = tuple(entry_points)
        self._environment = environment if environment is not None else CompilationEnvironment()

    @property
    def environment(self) -> CompilationEnvironment:
        return self._environment

    @property
    def entry_points(self) -> tuple[EntryPointDescriptor, ...]:
        return self._entry_points

    def enumerate_marked_types(self, marker_name: str) -> list[TypeDescriptor]:
        return [descriptor for descriptor in self._graph if descriptor.has_marker(marker_name)]

    def enumerate_marked_methods(self, marker_name: str) -> list[EntryPointDescriptor]:
        # Entry points are registered already filtered by the entry-point marker.
        _ = marker_name
        return list(self._entry_points)

    def get_transitive_interfaces(self, type_descriptor: TypeDescriptor) -> list[TypeDescriptor]:
        return list(self._graph.interfaces_of(type_descriptor))

    def get_marker_arguments(
        self,
        type_descriptor: TypeDescriptor,
        marker_name: str,
    ) -> MarkerArguments | None:
        marker = type_descriptor.find_marker(marker_name)
        if marker is None:
            return None
        return marker.arguments


class InMemoryArtifactSink:
    """Collects artifacts in emission order."""

    def __init__(self) -> None:
        self._artifacts: dict[str, str] = {}

    def emit(self, name: str, text: str) -> None:
        if name in self._artifacts:
            msg = f"Artifact '{name}' was already emitted in this pass."
            raise AutoregDuplicateArtifactError(msg)
        self._artifacts[name] = text

    @property
    def names(self) -> list[str]:
        return list(self._artifacts)

    def get(self, name: str) -> str:
        return self._artifacts[name]

    def items(self) -> Sequence[tuple[str, str]]:
        return list(self._artifacts.items())

    def __contains__(self, name: object) -> bool:
        return name in self._artifacts

    def __iter__(self) -> Iterator[str]:
        return iter(self._artifacts)

    def __len__(self) -> int:
        return len(self._artifacts)


class DirectoryArtifactSink:
    """Writes each artifact to ``<directory>/<name>`` as UTF-8.

    Existing files are overwritten, so repeated passes replace rather than
    duplicate their output.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self._emitted: set[str] = set()

    def emit(self, name: str, text: str) -> None:
        if name in self._emitted:
            msg = f"Artifact '{name}' was already emitted in this pass."
            raise AutoregDuplicateArtifactError(msg)
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / name
        path.write_text(text, encoding="utf-8", newline="\n")
        self._emitted.add(name)
        logger.debug("Wrote artifact %s", path)
