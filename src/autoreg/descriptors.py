from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from typing_extensions import Self

_GLOBAL_ALIAS_PREFIX = "global::"


def canonical_type_name(name: str) -> str:
    """Return ``name`` without the ``global::`` alias qualifier.

    Args:
        name: Fully qualified type name as displayed by the host.

    """
    if name.startswith(_GLOBAL_ALIAS_PREFIX):
        return name[len(_GLOBAL_ALIAS_PREFIX) :]
    return name


class ValueKind(str, Enum):
    """Shape of a marker argument value as bound by the host."""

    PRIMITIVE = "primitive"
    """A literal such as an integer, a string or a boolean."""

    ENUM = "enum"
    """An enumeration member, carried as its underlying integer code."""

    TYPE = "type"
    """A type reference, carried as the canonical name of the referenced type."""

    NULL = "null"
    """An explicit ``null`` argument."""

    ERROR = "error"
    """An argument the host failed to bind."""


@dataclass(frozen=True, slots=True)
class MarkerValue:
    """A typed constant supplied to a marker constructor or named argument."""

    kind: ValueKind
    value: Any = None

    @classmethod
    def primitive(cls, value: Any) -> MarkerValue:
        return cls(kind=ValueKind.PRIMITIVE, value=value)

    @classmethod
    def enum(cls, code: int) -> MarkerValue:
        return cls(kind=ValueKind.ENUM, value=code)

    @classmethod
    def type_ref(cls, name: str) -> MarkerValue:
        return cls(kind=ValueKind.TYPE, value=name)

    @classmethod
    def null(cls) -> MarkerValue:
        return cls(kind=ValueKind.NULL)

    @classmethod
    def error(cls) -> MarkerValue:
        return cls(kind=ValueKind.ERROR)


@dataclass(frozen=True, slots=True)
class MarkerArguments:
    """Positional and named arguments of one marker instance.

    Named arguments keep their declaration order, which decides which error is
    noticed first when several are malformed.
    """

    positional: tuple[MarkerValue, ...] = ()
    named: tuple[tuple[str, MarkerValue], ...] = ()

    @classmethod
    def from_mapping(
        cls,
        positional: Sequence[MarkerValue] = (),
        named: dict[str, MarkerValue] | None = None,
    ) -> MarkerArguments:
        """Build arguments from a positional sequence and an ordered mapping."""
        return cls(positional=tuple(positional), named=tuple((named or {}).items()))


@dataclass(frozen=True, slots=True)
class MarkerInstance:
    """A declarative marker attached to a type or method."""

    name: str
    arguments: MarkerArguments = field(default_factory=MarkerArguments)


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Read-only description of a declared class or interface.

    ``interfaces`` lists the canonical names of the transitively implemented
    interfaces in declaration order. Each name is resolved through a
    ``TypeGraph``; descriptors never hold references to each other.
    """

    name: str
    markers: tuple[MarkerInstance, ...] = ()
    interfaces: tuple[str, ...] = ()

    def has_marker(self, marker_name: str) -> bool:
        return self.find_marker(marker_name) is not None

    def find_marker(self, marker_name: str) -> MarkerInstance | None:
        """Return the first marker instance named ``marker_name``, if any."""
        expected = canonical_type_name(marker_name)
        for marker in self.markers:
            if canonical_type_name(marker.name) == expected:
                return marker
        return None


class TypeGraph:
    """Arena of type descriptors addressed by canonical name.

    Every distinct canonical name gets one index on insertion; the first
    descriptor seen for a name is the one kept. Lookups ignore the
    ``global::`` alias, while descriptors keep the name they were declared with.
    """

    __slots__ = ("_index_by_name", "_types")

    def __init__(self, types: Iterable[TypeDescriptor] = ()) -> None:
        index_by_name: dict[str, int] = {}
        ordered: list[TypeDescriptor] = []
        for descriptor in types:
            name = canonical_type_name(descriptor.name)
            if name in index_by_name:
                continue
            index_by_name[name] = len(ordered)
            ordered.append(descriptor)
        self._index_by_name = index_by_name
        self._types = tuple(ordered)

    @classmethod
    def materialize(
        cls,
        roots: Iterable[TypeDescriptor],
        get_interfaces: Callable[[TypeDescriptor], Sequence[TypeDescriptor]],
    ) -> Self:
        """Build a graph from ``roots`` and everything reachable through ``get_interfaces``.

        Args:
            roots: Types to start from, usually the marked service classes.
            get_interfaces: Host callback returning the transitive interfaces of a type.

        """
        collected: list[TypeDescriptor] = []
        seen: set[str] = set()
        pending: deque[TypeDescriptor] = deque(roots)
        while pending:
            descriptor = pending.popleft()
            name = canonical_type_name(descriptor.name)
            if name in seen:
                continue
            seen.add(name)
            collected.append(descriptor)
            pending.extend(get_interfaces(descriptor))
        return cls(collected)

    def index_of(self, name: str) -> int | None:
        return self._index_by_name.get(canonical_type_name(name))

    def get(self, name: str) -> TypeDescriptor | None:
        index = self.index_of(name)
        if index is None:
            return None
        return self._types[index]

    def interfaces_of(self, descriptor: TypeDescriptor) -> tuple[TypeDescriptor, ...]:
        """Resolve the interface names of ``descriptor`` in declaration order.

        Names missing from the graph resolve to bare descriptors without
        markers or parents.
        """
        return tuple(self.get(name) or TypeDescriptor(name=name) for name in descriptor.interfaces)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_type_name(name) in self._index_by_name

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)


@dataclass(frozen=True, slots=True)
class CompilationEnvironment:
    """Well-known types available in the compilation being generated for.

    ``known_types`` of ``None`` means every type is available.
    """

    known_types: frozenset[str] | None = None

    def __post_init__(self) -> None:
        if self.known_types is not None:
            object.__setattr__(
                self,
                "known_types",
                frozenset(canonical_type_name(name) for name in self.known_types),
            )

    def has_type(self, name: str) -> bool:
        if self.known_types is None:
            return True
        return canonical_type_name(name) in self.known_types


@dataclass(frozen=True, slots=True)
class TypeReference:
    """A type as written in a signature."""

    name: str
    nullable: bool = False

    @property
    def canonical_name(self) -> str:
        return canonical_type_name(self.name)

    @property
    def display(self) -> str:
        """Source text of the type, with a ``?`` suffix when nullable."""
        if self.nullable and not self.name.endswith("?"):
            return f"{self.name}?"
        return self.name

    def is_same_type(self, other: TypeReference) -> bool:
        """Compare by canonical name, ignoring nullability."""
        return self.canonical_name.rstrip("?") == other.canonical_name.rstrip("?")


class Accessibility(str, Enum):
    """Declared accessibility of a type."""

    PUBLIC = "public"
    INTERNAL = "internal"
    PROTECTED = "protected"
    PRIVATE = "private"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"
    NOT_APPLICABLE = ""


@dataclass(frozen=True, slots=True)
class ContainingTypeDescriptor:
    """The type that declares an entry point."""

    name: str
    namespace: str = ""
    kind: str = "class"
    accessibility: Accessibility = Accessibility.PUBLIC
    modifiers: tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """One declared parameter of an entry point."""

    name: str
    type: TypeReference
    modifiers: tuple[str, ...] = ()
    default_value: str | None = None


@dataclass(frozen=True, slots=True)
class EntryPointDescriptor:
    """A method designated to receive the synthesized registration body."""

    containing_type: ContainingTypeDescriptor
    method_name: str
    parameters: tuple[ParameterDescriptor, ...] = ()
    return_type: TypeReference | None = None
    """Declared return type, ``None`` for ``void``."""
    modifiers: tuple[str, ...] = ()

    @property
    def returns_void(self) -> bool:
        return self.return_type is None


__all__ = [
    "Accessibility",
    "CompilationEnvironment",
    "ContainingTypeDescriptor",
    "EntryPointDescriptor",
    "MarkerArguments",
    "MarkerInstance",
    "MarkerValue",
    "ParameterDescriptor",
    "TypeDescriptor",
    "TypeGraph",
    "TypeReference",
    "ValueKind",
    "canonical_type_name",
]
