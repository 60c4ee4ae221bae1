"""Typed errors for hufftree.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- The CLI maps errors to stable exit codes (see EXIT_CODE_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
- Format errors carry an ErrorKind so callers can tell them apart without
  matching on messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_VERIFY_MISMATCH = 13


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, invalid run spec, etc.)"),
    ExitCodeInfo(
        EXIT_GENERIC,
        "GENERIC",
        "Generic failure (bad magic, truncated header/body, unexpected error, etc.)",
    ),
    ExitCodeInfo(
        EXIT_VERIFY_MISMATCH,
        "VERIFY_MISMATCH",
        "Round-trip verification failed (decoded bytes differ from the source)",
    ),
)

# For convenience (fast lookup)
_EXIT_CODE_BY_NAME: dict[str, int] = {e.name: e.code for e in EXIT_CODES}
_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def exit_code_by_name(name: str) -> int | None:
    return _EXIT_CODE_BY_NAME.get(name.strip().upper())


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE — do not edit manually.\n")
    lines.append("> Source of truth: `src/hufftree/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Decode error kinds\n\n")
    lines.append("| Kind | Raised as |\n")
    lines.append("|---|---|\n")
    for kind, cls_name in (
        (ErrorKind.MALFORMED_HEADER, "`BadMagic`, `MalformedHeader`"),
        (ErrorKind.TRUNCATED_HEADER, "`TruncatedHeader`"),
        (ErrorKind.TRUNCATED_BODY, "`TruncatedBody`"),
    ):
        lines.append(f"| `{kind.value}` | {cls_name} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Every internal error extends `HuffTreeError` and carries an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append(
        "- A failed `decompress` removes the partial output file unless `--keep-partial` is set.\n"
    )
    return "".join(lines)


class ErrorKind(str, Enum):
    """Decode failure kinds."""

    MALFORMED_HEADER = "malformed_header"
    TRUNCATED_HEADER = "truncated_header"
    TRUNCATED_BODY = "truncated_body"


# ---------------
# Typed exceptions
# ---------------


class HuffTreeError(Exception):
    """Base error for hufftree."""

    exit_code: int = EXIT_GENERIC
    kind: ErrorKind | None = None


class UsageError(HuffTreeError):
    exit_code = EXIT_USAGE


class CorruptPayload(HuffTreeError):
    exit_code = EXIT_GENERIC


class BadMagic(CorruptPayload):
    kind = ErrorKind.MALFORMED_HEADER


class MalformedHeader(CorruptPayload):
    kind = ErrorKind.MALFORMED_HEADER


class TruncatedHeader(CorruptPayload):
    kind = ErrorKind.TRUNCATED_HEADER


class TruncatedBody(CorruptPayload):
    kind = ErrorKind.TRUNCATED_BODY


class VerifyMismatch(HuffTreeError):
    exit_code = EXIT_VERIFY_MISMATCH
