"""File benchmark: hufftree compress -> decompress -> compare, plus reference ratios.

One JSON-serializable row per file; ratios are compressed/original (lower is better).
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

from hufftree.core.codec_hufftree import compress_bytes, decompress_bytes
from hufftree.core.reference_codecs import reference_codecs

SCHEMA_ID = "hufftree.bench.v1"


def _ratio(comp_len: int, orig_len: int) -> float | None:
    if orig_len == 0:
        return None
    return comp_len / orig_len


def bench_file(path: str | Path, *, iters: int = 1) -> dict[str, Any]:
    p = Path(path)
    data = p.read_bytes()
    iters = max(1, int(iters))

    t_comp = 0.0
    t_decomp = 0.0
    blob = b""
    back = b""
    for _ in range(iters):
        t0 = time.perf_counter()
        blob = compress_bytes(data)
        t_comp += time.perf_counter() - t0

        t1 = time.perf_counter()
        back = decompress_bytes(blob)
        t_decomp += time.perf_counter() - t1

    refs: dict[str, float | None] = {}
    for codec in reference_codecs():
        comp = codec.compress(data)
        if codec.decompress(comp) != data:
            raise RuntimeError(f"{codec.codec_id}: roundtrip reference non lossless su {p}")
        refs[codec.codec_id] = _ratio(len(comp), len(data))

    return {
        "file": str(p),
        "bytes": len(data),
        "compressed_bytes": len(blob),
        "ratio": _ratio(len(blob), len(data)),
        "iters": iters,
        "times_sec": {
            "compress_avg": t_comp / iters,
            "decompress_avg": t_decomp / iters,
        },
        "roundtrip_ok": back == data,
        "reference_ratios": refs,
    }


def bench_summary(rows: list[dict[str, Any]]) -> dict[str, Any]:
    total_in = sum(int(r["bytes"]) for r in rows)
    total_out = sum(int(r["compressed_bytes"]) for r in rows)
    return {
        "schema": SCHEMA_ID,
        "files": len(rows),
        "bytes": total_in,
        "compressed_bytes": total_out,
        "ratio": _ratio(total_out, total_in),
        "all_roundtrip_ok": all(bool(r["roundtrip_ok"]) for r in rows),
    }
