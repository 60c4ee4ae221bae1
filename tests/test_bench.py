from __future__ import annotations

import json
from pathlib import Path

import pytest

from hufftree.bench import SCHEMA_ID, bench_file, bench_summary
from hufftree.core.reference_codecs import CodecZlib, CodecZstd, have_zstd, reference_codecs

pytestmark = pytest.mark.bench


def test_bench_file_row(tmp_path: Path) -> None:
    p = tmp_path / "skew.txt"
    p.write_bytes(b"a" * 900 + b"b" * 90 + b"c" * 10)

    row = bench_file(p, iters=2)
    assert row["file"] == str(p)
    assert row["bytes"] == 1000
    assert row["iters"] == 2
    assert row["roundtrip_ok"] is True
    assert row["compressed_bytes"] < row["bytes"]
    assert 0 < row["ratio"] < 1
    assert set(row["times_sec"]) == {"compress_avg", "decompress_avg"}
    assert "zlib" in row["reference_ratios"]
    assert ("zstd" in row["reference_ratios"]) == have_zstd()
    # row must be JSON-serializable as-is
    json.dumps(row)


def test_bench_empty_file_has_no_ratio(tmp_path: Path) -> None:
    p = tmp_path / "empty.bin"
    p.write_bytes(b"")
    row = bench_file(p, iters=0)
    assert row["iters"] == 1
    assert row["compressed_bytes"] == 6
    assert row["ratio"] is None
    assert row["reference_ratios"]["zlib"] is None


def test_bench_summary() -> None:
    rows = [
        {"bytes": 100, "compressed_bytes": 60, "roundtrip_ok": True},
        {"bytes": 300, "compressed_bytes": 140, "roundtrip_ok": True},
    ]
    s = bench_summary(rows)
    assert s["schema"] == SCHEMA_ID
    assert s["files"] == 2
    assert s["bytes"] == 400
    assert s["compressed_bytes"] == 200
    assert s["ratio"] == pytest.approx(0.5)
    assert s["all_roundtrip_ok"] is True

    rows.append({"bytes": 0, "compressed_bytes": 6, "roundtrip_ok": False})
    assert bench_summary(rows)["all_roundtrip_ok"] is False
    assert bench_summary([])["ratio"] is None


def test_reference_codecs_order_and_roundtrip() -> None:
    codecs = reference_codecs()
    assert codecs[0].codec_id == "zlib"
    data = b"reference codec payload " * 50
    for c in codecs:
        assert c.decompress(c.compress(data)) == data


def test_zlib_level_validated() -> None:
    with pytest.raises(ValueError):
        CodecZlib(level=10)


def test_zstd_missing_is_explicit(monkeypatch: pytest.MonkeyPatch) -> None:
    import hufftree.core.reference_codecs as rc

    monkeypatch.setattr(rc, "zstd", None)
    assert not rc.have_zstd()
    assert [c.codec_id for c in rc.reference_codecs()] == ["zlib"]
    with pytest.raises(RuntimeError, match="zstandard"):
        CodecZstd().compress(b"x")
