"""Typed errors for huffkit.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_UNSUPPORTED_VERSION = 11
EXIT_HASH_MISMATCH = 13
EXIT_IO = 14


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, invalid codec spec, etc.)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (corrupt payload, missing code, unexpected error)"),
    ExitCodeInfo(EXIT_UNSUPPORTED_VERSION, "UNSUPPORTED_VERSION", "Unsupported container version"),
    ExitCodeInfo(EXIT_HASH_MISMATCH, "HASH_MISMATCH", "Integrity failure (decoded data does not match stored SHA-256)"),
    ExitCodeInfo(EXIT_IO, "IO", "I/O failure (open/read/write/close of input or output)"),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE - do not edit manually.\n")
    lines.append("> Source of truth: `src/huffkit/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Internal errors extend `HuffkitError` and carry an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class HuffkitError(Exception):
    """Base error for huffkit."""

    exit_code: int = EXIT_GENERIC


class UsageError(HuffkitError):
    exit_code = EXIT_USAGE


class CorruptPayload(HuffkitError):
    exit_code = EXIT_GENERIC


class BadMagic(CorruptPayload):
    pass


class UnsupportedVersion(HuffkitError):
    exit_code = EXIT_UNSUPPORTED_VERSION


class HashMismatch(HuffkitError):
    exit_code = EXIT_HASH_MISMATCH


class MissingCode(HuffkitError):
    """A symbol reached the encoder without an entry in the code table.

    The code table comes from a count over the same input, so this is a
    logic fault in the caller, not a data condition.
    """

    exit_code = EXIT_GENERIC

    def __init__(self, symbol: int, position: int) -> None:
        super().__init__(f"simbolo senza codice: {symbol!r} (posizione {position})")
        self.symbol = symbol
        self.position = position


class StreamIOError(HuffkitError):
    """I/O failure on an input or output stream, tagged with stage and path."""

    exit_code = EXIT_IO

    def __init__(self, stage: str, path: object, reason: str) -> None:
        super().__init__(f"{stage}: {path}: {reason}")
        self.stage = stage
        self.path = path
        self.reason = reason
