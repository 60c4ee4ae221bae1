from __future__ import annotations

from hufftree.errors import (
    EXIT_CODES,
    EXIT_GENERIC,
    EXIT_USAGE,
    EXIT_VERIFY_MISMATCH,
    BadMagic,
    CorruptPayload,
    ErrorKind,
    HuffTreeError,
    MalformedHeader,
    TruncatedBody,
    TruncatedHeader,
    UsageError,
    VerifyMismatch,
    exit_code_by_name,
    exit_code_info,
    render_exit_codes_markdown,
)


def test_exit_codes_unique() -> None:
    codes = [e.code for e in EXIT_CODES]
    names = [e.name for e in EXIT_CODES]
    assert len(codes) == len(set(codes))
    assert len(names) == len(set(names))


def test_exit_code_lookups() -> None:
    assert exit_code_by_name("usage") == EXIT_USAGE
    assert exit_code_by_name(" VERIFY_MISMATCH ") == EXIT_VERIFY_MISMATCH
    assert exit_code_by_name("nope") is None
    info = exit_code_info(10)
    assert info is not None and info.name == "GENERIC"
    assert exit_code_info(99) is None


def test_error_hierarchy_exit_codes_and_kinds() -> None:
    assert UsageError("x").exit_code == EXIT_USAGE
    assert VerifyMismatch("x").exit_code == EXIT_VERIFY_MISMATCH
    for cls, kind in (
        (BadMagic, ErrorKind.MALFORMED_HEADER),
        (MalformedHeader, ErrorKind.MALFORMED_HEADER),
        (TruncatedHeader, ErrorKind.TRUNCATED_HEADER),
        (TruncatedBody, ErrorKind.TRUNCATED_BODY),
    ):
        e = cls("x")
        assert isinstance(e, CorruptPayload)
        assert isinstance(e, HuffTreeError)
        assert e.exit_code == EXIT_GENERIC
        assert e.kind == kind


def test_render_exit_codes_markdown() -> None:
    md = render_exit_codes_markdown()
    assert md.startswith("# Exit codes\n")
    for e in EXIT_CODES:
        assert f"| {e.code} | `{e.name}` |" in md
    for kind in ErrorKind:
        assert f"`{kind.value}`" in md


def test_docs_exit_codes_in_sync() -> None:
    from pathlib import Path

    doc = Path(__file__).resolve().parents[1] / "docs" / "exit_codes.md"
    assert doc.read_text(encoding="utf-8") == render_exit_codes_markdown()
