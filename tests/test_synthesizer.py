from __future__ import annotations

from dataclasses import replace

import pytest

from autoreg.cancellation import CancellationToken
from autoreg.config import GeneratorSettings
from autoreg.descriptors import (
    CompilationEnvironment,
    EntryPointDescriptor,
    ParameterDescriptor,
    TypeReference,
)
from autoreg.exceptions import AutoregOperationCancelledError
from autoreg.host import InMemoryArtifactSink
from autoreg.lifetime import Lifetime
from autoreg.markers import SERVICE_COLLECTION_TYPE
from autoreg.resolver import RegistrationRecord
from autoreg.synthesizer import RegistrationSynthesizer, synthesize_registrations


def _body_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines()]


def test_interface_registration_renders_full_compilation_unit(
    bare_settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
) -> None:
    artifact = synthesize_registrations(
        configure_entry_point,
        [RegistrationRecord(service_name="Foo", bound_interface_name="IFoo")],
        settings=bare_settings,
    )

    assert artifact is not None
    assert artifact.name == "Sample.Startup.g.cs"
    assert artifact.text == (
        "namespace Sample\n"
        "{\n"
        "    public static partial class Startup\n"
        "    {\n"
        "        public static partial void Configure("
        "Microsoft.Extensions.DependencyInjection.IServiceCollection c)\n"
        "        {\n"
        "            c.AddScoped<IFoo, Foo>();\n"
        "        }\n"
        "    }\n"
        "}\n"
    )


def test_nullable_container_uses_null_conditional_calls(
    bare_settings: GeneratorSettings,
    nullable_entry_point: EntryPointDescriptor,
) -> None:
    artifact = synthesize_registrations(
        nullable_entry_point,
        [RegistrationRecord(service_name="Bar", lifetime=Lifetime.TRANSIENT, key="k")],
        settings=bare_settings,
    )

    assert artifact is not None
    lines = artifact.text.splitlines()
    assert '            c?.AddKeyedTransient<Bar>("k");' in lines
    assert lines[2] == "#nullable enable"
    assert lines[-2] == "#nullable disable"


@pytest.mark.parametrize(
    ("record", "statement"),
    [
        (RegistrationRecord(service_name="A", lifetime=Lifetime.SINGLETON), "c.AddSingleton<A>();"),
        (RegistrationRecord(service_name="A", lifetime=Lifetime.SCOPED), "c.AddScoped<A>();"),
        (RegistrationRecord(service_name="A", lifetime=Lifetime.TRANSIENT), "c.AddTransient<A>();"),
        (
            RegistrationRecord(service_name="A", bound_interface_name="IA", key="x"),
            'c.AddKeyedScoped<IA, A>("x");',
        ),
        (
            RegistrationRecord(service_name="A", lifetime=Lifetime.SINGLETON, key='say "hi"\n'),
            'c.AddKeyedSingleton<A>("say \\"hi\\"\\n");',
        ),
    ],
)
def test_registration_statement_shapes(
    bare_settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
    record: RegistrationRecord,
    statement: str,
) -> None:
    artifact = synthesize_registrations(configure_entry_point, [record], settings=bare_settings)

    assert artifact is not None
    assert statement in _body_lines(artifact.text)


def test_statements_follow_record_order(
    bare_settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
) -> None:
    records = [RegistrationRecord(service_name=name) for name in ["Zeta", "Alpha", "Mid"]]

    artifact = synthesize_registrations(configure_entry_point, records, settings=bare_settings)

    assert artifact is not None
    statements = [line for line in _body_lines(artifact.text) if line.startswith("c.")]
    assert statements == ["c.AddScoped<Zeta>();", "c.AddScoped<Alpha>();", "c.AddScoped<Mid>();"]


def test_void_entry_point_without_records_gets_return_statement(
    bare_settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
) -> None:
    artifact = synthesize_registrations(configure_entry_point, [], settings=bare_settings)

    assert artifact is not None
    assert _body_lines(artifact.text)[-5:] == ["{", "return;", "}", "}", "}"]


def test_entry_point_returning_container_returns_parameter(
    bare_settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
) -> None:
    entry_point = replace(
        configure_entry_point,
        return_type=TypeReference(name=f"global::{SERVICE_COLLECTION_TYPE}"),
    )

    artifact = synthesize_registrations(
        entry_point,
        [RegistrationRecord(service_name="Foo")],
        settings=bare_settings,
    )

    assert artifact is not None
    lines = _body_lines(artifact.text)
    assert lines[lines.index("c.AddScoped<Foo>();") + 1] == "return c;"


def test_entry_point_returning_other_type_returns_default(
    bare_settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
) -> None:
    entry_point = replace(configure_entry_point, return_type=TypeReference(name="int"))

    artifact = synthesize_registrations(entry_point, [], settings=bare_settings)

    assert artifact is not None
    assert _body_lines(artifact.text)[-5:] == [";", "return default(int);", "}", "}", "}"]


def test_entry_point_without_container_parameter_is_skipped(
    configure_entry_point: EntryPointDescriptor,
) -> None:
    entry_point = replace(
        configure_entry_point,
        parameters=(ParameterDescriptor(name="s", type=TypeReference(name="string")),),
    )

    assert synthesize_registrations(entry_point, [RegistrationRecord(service_name="Foo")]) is None


def test_first_container_parameter_receives_registrations(
    bare_settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
) -> None:
    entry_point = replace(
        configure_entry_point,
        parameters=(
            ParameterDescriptor(name="name", type=TypeReference(name="string")),
            ParameterDescriptor(name="first", type=TypeReference(name=SERVICE_COLLECTION_TYPE)),
            ParameterDescriptor(name="second", type=TypeReference(name=SERVICE_COLLECTION_TYPE)),
        ),
    )

    artifact = synthesize_registrations(
        entry_point,
        [RegistrationRecord(service_name="Foo")],
        settings=bare_settings,
    )

    assert artifact is not None
    assert "first.AddScoped<Foo>();" in _body_lines(artifact.text)


def test_missing_container_type_skips_synthesis(
    configure_entry_point: EntryPointDescriptor,
) -> None:
    synthesizer = RegistrationSynthesizer(
        environment=CompilationEnvironment(known_types=frozenset()),
    )

    assert synthesizer.synthesize(configure_entry_point, []) is None


def test_synthesis_is_deterministic(
    settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
) -> None:
    records = [
        RegistrationRecord(service_name="Foo", bound_interface_name="IFoo", key="a"),
        RegistrationRecord(service_name="Bar", lifetime=Lifetime.SINGLETON),
    ]

    first = RegistrationSynthesizer(settings=settings).synthesize(configure_entry_point, records)
    second = RegistrationSynthesizer(settings=settings).synthesize(configure_entry_point, records)

    assert first == second


def test_rendered_text_is_whitespace_normalized(
    settings: GeneratorSettings,
    configure_entry_point: EntryPointDescriptor,
) -> None:
    artifact = synthesize_registrations(
        configure_entry_point,
        [RegistrationRecord(service_name="Foo")],
        settings=settings,
    )

    assert artifact is not None
    assert artifact.text.endswith("}\n")
    assert not artifact.text.endswith("\n\n")
    assert "\r" not in artifact.text
    assert all(line == line.rstrip() for line in artifact.text.splitlines())
    assert artifact.text.startswith("// <auto-generated/>\n\nusing System;\n")


def test_synthesize_into_emits_to_sink(configure_entry_point: EntryPointDescriptor) -> None:
    sink = InMemoryArtifactSink()

    artifact = RegistrationSynthesizer().synthesize_into(
        configure_entry_point,
        [],
        sink,
        artifact_name="Custom.g.cs",
    )

    assert artifact is not None
    assert sink.names == ["Custom.g.cs"]
    assert sink.get("Custom.g.cs") == artifact.text


def test_cancelled_token_stops_synthesis(configure_entry_point: EntryPointDescriptor) -> None:
    token = CancellationToken()
    token.cancel()
    sink = InMemoryArtifactSink()

    with pytest.raises(AutoregOperationCancelledError):
        RegistrationSynthesizer(cancellation_token=token).synthesize_into(
            configure_entry_point,
            [],
            sink,
        )

    assert len(sink) == 0
