"""Plain-text rendering of destination results."""

from __future__ import annotations

import sys
from typing import BinaryIO, TextIO

from .executor import DestinationResult


def format_success(result: DestinationResult) -> bytes:
    """Header line followed by the raw remote output."""
    header = f"[Host] {result.destination.label}\n[Content] \n".encode()
    return header + (result.output or b"") + b"\n"


def format_failure(result: DestinationResult) -> str:
    line = f"ERROR: [Host] {result.destination.label}"
    if result.error:
        line = f"{line}: {result.error}"
    return line + "\n"


def write_result(
    result: DestinationResult,
    stdout: BinaryIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Write a result to stdout (success) or stderr (failure) in one write."""
    if result.ok:
        out = stdout if stdout is not None else sys.stdout.buffer
        out.write(format_success(result))
        out.flush()
    else:
        err = stderr if stderr is not None else sys.stderr
        err.write(format_failure(result))
        err.flush()
