#!/usr/bin/env python3
"""Randomized CLI smoke test for hufftree.

Goal:
- deterministic, repeatable file roundtrips through the real CLI
- produce a JSON report
- fail fast (non-zero exit) on any mismatch

Each iteration writes a few generated files (text, skewed binary, random,
single byte, empty), then runs compress -> verify --full -> decompress -> diff,
and finally truncates the compressed file to check the decode error path.

Usage examples:
  python tools/smoke_roundtrip.py --iters 10
  python tools/smoke_roundtrip.py --iters 50 --seed 123 --keep
"""

from __future__ import annotations

import argparse
import json
import os
import random
import shutil
import string
import subprocess
import sys
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


def _run(cmd: list[str], *, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    return subprocess.run(cmd, text=True, capture_output=True, env=env)


def _gen_text(rng: random.Random) -> bytes:
    lines: list[str] = []
    for _ in range(rng.randint(3, 40)):
        words = [
            "".join(rng.choice(string.ascii_lowercase) for _ in range(rng.randint(1, 9)))
            for _ in range(rng.randint(2, 12))
        ]
        lines.append(" ".join(words))
    return ("\n".join(lines) + "\n").encode("utf-8")


def _gen_skewed(rng: random.Random, n: int) -> bytes:
    # few hot symbols, long tail: deep trees
    weights = [2 ** (16 - min(i, 16)) for i in range(256)]
    return bytes(rng.choices(range(256), weights=weights, k=n))


def _gen_cases(rng: random.Random, max_bytes: int) -> dict[str, bytes]:
    return {
        "text.txt": _gen_text(rng),
        "skewed.bin": _gen_skewed(rng, rng.randint(1, max_bytes)),
        "random.bin": os.urandom(rng.randint(1, max_bytes)),
        "single.bin": bytes([rng.randrange(256)]) * rng.randint(1, 64),
        "empty.bin": b"",
    }


@dataclass
class StepResult:
    name: str
    ok: bool
    rc: int
    stdout: str
    stderr: str


def main() -> int:
    ap = argparse.ArgumentParser(description="hufftree randomized CLI smoke test")
    ap.add_argument("--iters", type=int, default=10, help="Number of iterations (default: 10)")
    ap.add_argument("--seed", type=int, default=12345, help="Deterministic RNG seed (default: 12345)")
    ap.add_argument("--max-bytes", type=int, default=50_000, help="Max binary file size (default: 50000)")
    ap.add_argument("--keep", action="store_true", help="Keep temp workdir on exit")
    ap.add_argument("--workdir", type=Path, default=None, help="Optional workdir (default: temp)")
    ap.add_argument("--json-out", type=Path, default=None, help="Write JSON report to file")
    ap.add_argument("--python", dest="pyexe", default=sys.executable, help="Python executable to use")
    ns = ap.parse_args()

    rng = random.Random(ns.seed)
    repo_src = Path(__file__).resolve().parents[1] / "src"
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(repo_src), env.get("PYTHONPATH", "")) if p)

    if ns.workdir:
        wd = ns.workdir.resolve()
        wd.mkdir(parents=True, exist_ok=True)
        own_temp = False
    else:
        wd = Path(tempfile.mkdtemp(prefix="hufftree-smoke-"))
        own_temp = True

    report: dict[str, Any] = {
        "ok": True,
        "seed": ns.seed,
        "iters": ns.iters,
        "max_bytes": ns.max_bytes,
        "workdir": str(wd),
        "steps": [],
    }

    def add_step(name: str, res: subprocess.CompletedProcess[str], *, expect_rc: int = 0) -> None:
        step = StepResult(
            name=name,
            ok=res.returncode == expect_rc,
            rc=res.returncode,
            stdout=res.stdout,
            stderr=res.stderr,
        )
        report["steps"].append(asdict(step))
        if not step.ok:
            report["ok"] = False

    def fail(name: str, msg: str) -> None:
        report["ok"] = False
        report["steps"].append(asdict(StepResult(name=name, ok=False, rc=1, stdout="", stderr=msg)))

    def run_cli(*args: str) -> subprocess.CompletedProcess[str]:
        return _run([ns.pyexe, "-m", "hufftree.cli", *args], env=env)

    try:
        for it in range(ns.iters):
            it_dir = wd / f"iter_{it:03d}"
            it_dir.mkdir(parents=True, exist_ok=True)

            for fname, data in _gen_cases(rng, ns.max_bytes).items():
                src = it_dir / fname
                comp = it_dir / (fname + ".huf")
                back = it_dir / (fname + ".back")
                src.write_bytes(data)
                tag = f"it{it:03d}_{fname}"

                add_step(f"{tag}_compress", run_cli("compress", str(src), str(comp), "--verify"))
                add_step(f"{tag}_verify_full", run_cli("verify", str(comp), "--full"))
                add_step(f"{tag}_decompress", run_cli("decompress", str(comp), str(back)))

                if not back.is_file() or back.read_bytes() != data:
                    fail(f"{tag}_diff", "File roundtrip mismatch (bytes differ)")

                # Truncate to half: PSEUDO_EOF code is lost -> exit 10, no output left
                blob = comp.read_bytes() if comp.is_file() else b""
                if data and len(blob) > 6:
                    cut = it_dir / (fname + ".cut.huf")
                    cut_back = it_dir / (fname + ".cut.back")
                    cut.write_bytes(blob[: len(blob) // 2])
                    add_step(
                        f"{tag}_truncated_expect_10",
                        run_cli("decompress", str(cut), str(cut_back)),
                        expect_rc=10,
                    )
                    if cut_back.exists():
                        fail(f"{tag}_truncated_partial", "Partial output left after failed decode")

        if ns.json_out:
            ns.json_out.parent.mkdir(parents=True, exist_ok=True)
            ns.json_out.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")

        print(
            json.dumps(
                {"ok": report["ok"], "seed": ns.seed, "iters": ns.iters, "workdir": str(wd)},
                ensure_ascii=False,
            )
        )
        return 0 if report["ok"] else 1

    finally:
        if own_temp and not ns.keep:
            shutil.rmtree(wd, ignore_errors=True)


if __name__ == "__main__":
    raise SystemExit(main())
