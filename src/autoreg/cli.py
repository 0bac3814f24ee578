from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from pydantic import ValidationError

from autoreg.cancellation import CancellationToken
from autoreg.config import GeneratorSettings
from autoreg.exceptions import AutoregInvalidSnapshotError
from autoreg.generator import GenerationResult, RegistrationGenerator
from autoreg.host import ArtifactSink, DirectoryArtifactSink, InMemoryArtifactSink
from autoreg.snapshot import load_snapshot

EXIT_OK = 0
EXIT_INVALID_SNAPSHOT = 1
EXIT_INVALID_SETTINGS = 2
EXIT_CANCELLED = 130

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autoreg",
        description="Generate dependency registration entry points from a host model snapshot.",
    )
    parser.add_argument("snapshot", type=Path, help="Path to the host model snapshot JSON.")
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to write artifacts to. Prints them to stdout when omitted.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging level; overrides AUTOREG_LOG_LEVEL.",
    )
    parser.add_argument(
        "--suffix",
        default=None,
        help="Artifact name suffix; overrides AUTOREG_ARTIFACT_SUFFIX.",
    )
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run the generator from the command line and return the exit code."""
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    args = _build_parser().parse_args(argv)

    overrides: dict[str, str] = {}
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.suffix is not None:
        overrides["artifact_suffix"] = args.suffix
    try:
        settings = GeneratorSettings(**overrides)
    except ValidationError as error:
        print(f"autoreg: invalid settings: {error}", file=err)
        return EXIT_INVALID_SETTINGS
    logging.basicConfig(level=settings.log_level, stream=err)

    try:
        model = load_snapshot(args.snapshot)
    except AutoregInvalidSnapshotError as error:
        print(f"autoreg: {error}", file=err)
        return EXIT_INVALID_SNAPSHOT

    sink: ArtifactSink
    buffer: InMemoryArtifactSink | None = None
    if args.output_dir is not None:
        sink = DirectoryArtifactSink(args.output_dir)
    else:
        buffer = InMemoryArtifactSink()
        sink = buffer

    token = CancellationToken()
    try:
        result = RegistrationGenerator(settings=settings).run(model, sink, cancellation_token=token)
    except KeyboardInterrupt:
        token.cancel()
        print("autoreg: cancelled", file=err)
        return EXIT_CANCELLED

    _report(result=result, stderr=err)
    if buffer is not None:
        _print_artifacts(buffer=buffer, stdout=out)
    return EXIT_CANCELLED if result.cancelled else EXIT_OK


def _report(*, result: GenerationResult, stderr: TextIO) -> None:
    for diagnostic in result.diagnostics:
        print(str(diagnostic), file=stderr)
    logger.info(
        "%d registration(s) written to %d artifact(s)",
        len(result.records),
        len(result.artifacts),
    )


def _print_artifacts(*, buffer: InMemoryArtifactSink, stdout: TextIO) -> None:
    for name, text in buffer.items():
        stdout.write(f"// ---- {name} ----\n")
        stdout.write(text)
