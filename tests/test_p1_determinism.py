from __future__ import annotations

import hashlib
import os
import subprocess
import sys
from pathlib import Path

import pytest

pytestmark = pytest.mark.p1

SRC = Path(__file__).resolve().parents[1] / "src"


def sha256_file(p: Path) -> str:
    h = hashlib.sha256()
    with p.open("rb") as f:
        while True:
            b = f.read(1024 * 1024)
            if not b:
                break
            h.update(b)
    return h.hexdigest()


def write_inputs(root: Path) -> list[Path]:
    # deterministico, include vuoto + unicode + bin
    root.mkdir(parents=True, exist_ok=True)
    files = {
        "hello.txt": "ciao\n".encode("utf-8"),
        "unicø∂e.txt": "Ω\nλ\n".encode("utf-8"),
        "empty.txt": b"",
        "tiny.bin": b"\x00\x01\x02\x03\xff",
        "all_bytes.bin": bytes(range(256)) * 4,
        "skew.bin": b"\x00" * 4000 + b"\x01" * 40 + b"\x02",
    }
    out = []
    for name, data in files.items():
        p = root / name
        p.write_bytes(data)
        out.append(p)
    return out


def run(args: list[str]) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC), env.get("PYTHONPATH", "")) if p)
    cmd = [
        sys.executable,
        "-c",
        "from hufftree.cli import main; raise SystemExit(main())",
        *args,
    ]
    return subprocess.run(cmd, text=True, capture_output=True, env=env)


def assert_ok(cp: subprocess.CompletedProcess[str], msg: str) -> None:
    if cp.returncode != 0:
        raise AssertionError(
            f"{msg}\ncmd: {cp.args}\nrc={cp.returncode}\nstdout:\n{cp.stdout}\nstderr:\n{cp.stderr}\n"
        )


@pytest.mark.p1
def test_determinism_compress_twice_same_bytes(tmp_path: Path) -> None:
    inputs = write_inputs(tmp_path / "in")
    out1 = tmp_path / "out1"
    out2 = tmp_path / "out2"
    out1.mkdir()
    out2.mkdir()

    for src in inputs:
        name = src.name + ".huf"
        assert_ok(run(["compress", str(src), str(out1 / name)]), f"compress #1 fallito: {src.name}")
        assert_ok(run(["compress", str(src), str(out2 / name)]), f"compress #2 fallito: {src.name}")

    for src in inputs:
        a = out1 / (src.name + ".huf")
        b = out2 / (src.name + ".huf")
        assert sha256_file(a) == sha256_file(b), (
            f"{src.name}: output deve essere identico (determinismo)"
        )


@pytest.mark.p1
def test_determinism_roundtrip_fingerprints(tmp_path: Path) -> None:
    inputs = write_inputs(tmp_path / "in")
    for src in inputs:
        comp = tmp_path / (src.name + ".huf")
        back = tmp_path / (src.name + ".back")
        cp = run(["compress", str(src), str(comp), "--verify"])
        assert_ok(cp, f"compress fallito: {src.name}")
        assert_ok(run(["decompress", str(comp), str(back)]), f"decompress fallito: {src.name}")
        assert sha256_file(back) == sha256_file(src), f"{src.name}: roundtrip non identico"
