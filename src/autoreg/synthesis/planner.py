from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from autoreg.config import GeneratorSettings
from autoreg.descriptors import (
    Accessibility,
    EntryPointDescriptor,
    ParameterDescriptor,
    TypeReference,
)
from autoreg.lifetime import Lifetime
from autoreg.resolver import RegistrationRecord

_REGISTRATION_PREFIX = "Add"
_KEYED_INFIX = "Keyed"
_PARTIAL_MODIFIER = "partial"
_VOID_NO_OP_STATEMENT = "return;"
_EMPTY_STATEMENT = ";"
_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}
_LINE_SEPARATORS = {"\u0085", "\u2028", "\u2029"}
_C0_CONTROL_END = 0x20
_C1_CONTROL_START = 0x7F
_C1_CONTROL_END = 0x9F


@dataclass(frozen=True, slots=True)
class ContainerParameterPlan:
    """The entry-point parameter that receives the registrations."""

    name: str
    type: TypeReference

    @property
    def is_nullable(self) -> bool:
        return self.type.nullable or self.type.name.endswith("?")


@dataclass(frozen=True, slots=True)
class EntryPointPlan:
    """Deterministic plan consumed by the renderer."""

    artifact_name: str
    namespace: str
    type_declaration: str
    method_signature: str
    statements: tuple[str, ...]
    nullable_context: bool


class EntryPointPlanner:
    """Builds the rendering plan of one entry point."""

    def __init__(self, *, settings: GeneratorSettings) -> None:
        self._settings = settings
        self._container_type = TypeReference(name=settings.container_type)

    def build(
        self,
        *,
        entry_point: EntryPointDescriptor,
        records: Sequence[RegistrationRecord],
        artifact_name: str,
    ) -> EntryPointPlan | None:
        """Plan the artifact for ``entry_point``.

        Returns ``None`` when the entry point has no container parameter.

        Args:
            entry_point: Method that receives the registration body.
            records: Registration records in resolver order.
            artifact_name: Name the finished artifact is emitted under.

        """
        container = self.find_container_parameter(entry_point)
        if container is None:
            return None

        statements = [registration_statement(record, container) for record in records]
        if not statements:
            statements.append(_VOID_NO_OP_STATEMENT if entry_point.returns_void else _EMPTY_STATEMENT)
        if entry_point.return_type is not None:
            statements.append(
                self._return_statement(return_type=entry_point.return_type, container=container),
            )

        return EntryPointPlan(
            artifact_name=artifact_name,
            namespace=entry_point.containing_type.namespace,
            type_declaration=type_declaration(entry_point),
            method_signature=method_signature(entry_point),
            statements=tuple(statements),
            nullable_context=container.is_nullable,
        )

    def find_container_parameter(
        self,
        entry_point: EntryPointDescriptor,
    ) -> ContainerParameterPlan | None:
        """Return the first parameter typed as the container abstraction."""
        for parameter in entry_point.parameters:
            if parameter.type.is_same_type(self._container_type):
                return ContainerParameterPlan(name=parameter.name, type=parameter.type)
        return None

    def _return_statement(
        self,
        *,
        return_type: TypeReference,
        container: ContainerParameterPlan,
    ) -> str:
        if return_type.is_same_type(container.type):
            return f"return {container.name};"
        return f"return default({return_type.display});"


def registration_function_name(lifetime: Lifetime | int, *, keyed: bool) -> str:
    """Return the registration function for a lifetime, e.g. ``AddKeyedScoped``.

    Lifetime codes outside the known lifetimes fall back to ``Singleton``.

    Args:
        lifetime: Lifetime member or raw lifetime code.
        keyed: Whether the registration carries a key.

    """
    suffix = Lifetime.from_code(int(lifetime)).suffix
    infix = _KEYED_INFIX if keyed else ""
    return f"{_REGISTRATION_PREFIX}{infix}{suffix}"


def type_arguments(record: RegistrationRecord) -> tuple[str, ...]:
    if record.registers_as_self:
        return (record.service_name,)
    return (record.bound_interface_name, record.service_name)


def call_arguments(record: RegistrationRecord) -> tuple[str, ...]:
    if record.key is None:
        return ()
    return (string_literal(record.key),)


def registration_statement(record: RegistrationRecord, container: ContainerParameterPlan) -> str:
    """Render one registration call, null-conditional when the container is nullable."""
    function_name = registration_function_name(record.lifetime, keyed=record.is_keyed)
    access = "?." if container.is_nullable else "."
    type_argument_list = ", ".join(type_arguments(record))
    argument_list = ", ".join(call_arguments(record))
    return f"{container.name}{access}{function_name}<{type_argument_list}>({argument_list});"


def string_literal(value: str) -> str:
    """Quote ``value`` as a regular string literal."""
    return '"' + "".join(_escape_char(char) for char in value) + '"'


def _escape_char(char: str) -> str:
    escaped = _SIMPLE_ESCAPES.get(char)
    if escaped is not None:
        return escaped
    code = ord(char)
    if (
        code < _C0_CONTROL_END
        or _C1_CONTROL_START <= code <= _C1_CONTROL_END
        or char in _LINE_SEPARATORS
    ):
        return f"\\u{code:04x}"
    return char


def type_declaration(entry_point: EntryPointDescriptor) -> str:
    """Rebuild the declaring type header with ``partial`` placed once, last."""
    containing_type = entry_point.containing_type
    accessibility_words = set(containing_type.accessibility.value.split())
    parts: list[str] = []
    if containing_type.accessibility is not Accessibility.NOT_APPLICABLE:
        parts.append(containing_type.accessibility.value)
    parts.extend(
        modifier
        for modifier in containing_type.modifiers
        if modifier != _PARTIAL_MODIFIER and modifier not in accessibility_words
    )
    parts.extend([_PARTIAL_MODIFIER, containing_type.kind, containing_type.name])
    return " ".join(parts)


def method_signature(entry_point: EntryPointDescriptor) -> str:
    return_type = "void" if entry_point.return_type is None else entry_point.return_type.display
    parameters = ", ".join(parameter_declaration(parameter) for parameter in entry_point.parameters)
    return " ".join([*entry_point.modifiers, return_type, f"{entry_point.method_name}({parameters})"])


def parameter_declaration(parameter: ParameterDescriptor) -> str:
    declaration = " ".join([*parameter.modifiers, parameter.type.display, parameter.name])
    if parameter.default_value is not None:
        return f"{declaration} = {parameter.default_value}"
    return declaration


def plan_artifact_names(
    entry_points: Sequence[EntryPointDescriptor],
    *,
    suffix: str,
) -> list[str]:
    """Derive one artifact name per entry point, aligned with ``entry_points``.

    A type with a single entry point is named after the type alone. Several
    entry points on one type add the method name, and repeated method names
    (overloads) add a 1-based ordinal from the second occurrence on.

    Args:
        entry_points: Entry points in discovery order.
        suffix: Extension appended to every name, e.g. ``.g.cs``.

    """
    count_by_type = Counter(entry_point.containing_type.qualified_name for entry_point in entry_points)
    seen_methods: defaultdict[tuple[str, str], int] = defaultdict(int)
    names: list[str] = []
    for entry_point in entry_points:
        type_name = entry_point.containing_type.qualified_name
        if count_by_type[type_name] == 1:
            names.append(f"{type_name}{suffix}")
            continue
        method_key = (type_name, entry_point.method_name)
        seen_methods[method_key] += 1
        occurrence = seen_methods[method_key]
        ordinal = "" if occurrence == 1 else f".{occurrence}"
        names.append(f"{type_name}.{entry_point.method_name}{ordinal}{suffix}")
    return names
