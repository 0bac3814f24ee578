class AutoregError(Exception):
    """Represent a base class for all autoreg-specific failures.

    Catch this type when you want to handle any autoreg error path without
    matching each concrete exception class individually.
    """


class AutoregInvalidMarkerError(AutoregError):
    """Signal registration marker arguments that do not resolve to their declared shapes.

    Raised by ``parse_marker_data``, for example when the lifetime argument is
    not an integer-backed value or the interface argument is not a type.

    ``RegistrationResolver`` catches this error, skips the affected type and
    reports an ``AUTOREG001`` diagnostic instead of failing the pass.
    """


class AutoregOperationCancelledError(AutoregError):
    """Signal that a generation pass was cancelled by its caller.

    Raised by ``CancellationToken.raise_if_cancellation_requested`` while the
    resolver walks declared types or the synthesizer walks entry points. No
    artifact is emitted for the work that was in progress.

    ``RegistrationGenerator.run`` converts this error into a
    ``GenerationResult`` with ``cancelled=True``.
    """


class AutoregInvalidSnapshotError(AutoregError):
    """Signal that a host model snapshot cannot be loaded.

    Raised by ``load_snapshot`` and ``parse_snapshot`` when the JSON payload is
    unreadable or does not match the expected document shape.

    Typical fixes include regenerating the snapshot with the host exporter or
    correcting the reported field.
    """


class AutoregDuplicateArtifactError(AutoregError):
    """Signal that an artifact sink received the same name twice in one pass.

    Artifact names are derived from the declaring type and, when needed, the
    entry-point method name, so a duplicate means two entry points collapsed
    to the same identity.
    """
