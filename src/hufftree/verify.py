"""Verification helpers.

We implement:
  - file verify: validate a compressed file (magic + header; --full decodes the body)
  - roundtrip verify: decode a compressed file and compare it against its source

Policy: light by default, full decodes everything into a hashing sink.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path

from hufftree.core.bitio import BitOutputStream, open_bit_input
from hufftree.core.codec_hufftree import read_compressed_bits
from hufftree.core.huff_format import BITS_PER_INT, HUFF_TREE
from hufftree.core.huffman_tree import build_code_table, count_leaves
from hufftree.core.tree_header import read_tree_header
from hufftree.errors import BadMagic, CorruptPayload, VerifyMismatch

CHUNK_SIZE_DEFAULT = 256 * 1024


class _HashSink:
    """Write-only file object that hashes and counts instead of storing."""

    def __init__(self) -> None:
        self.h = hashlib.sha256()
        self.length = 0

    def write(self, b: bytes) -> int:
        self.h.update(b)
        self.length += len(b)
        return len(b)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


@dataclass(frozen=True)
class VerifyReport:
    path: str
    leaves: int
    header_bits: int
    full: bool
    decoded_bytes: int | None = None
    decoded_sha256: str | None = None


def _sha256_file(p: Path, *, chunk_size: int = CHUNK_SIZE_DEFAULT) -> str:
    h = hashlib.sha256()
    with p.open("rb") as f:
        while True:
            b = f.read(chunk_size)
            if not b:
                break
            h.update(b)
    return h.hexdigest()


def verify_compressed_file(path: str | Path, *, full: bool = False) -> VerifyReport:
    """Validate a compressed file; typed errors (BadMagic, Truncated*) propagate."""
    p = Path(path)
    with open_bit_input(p) as bits_in:
        magic = bits_in.read_bits(BITS_PER_INT)
        if magic != HUFF_TREE:
            raise BadMagic(f"{p}: magic non valido")

        root = read_tree_header(bits_in)
        header_bits = bits_in.bits_read - BITS_PER_INT
        leaves = count_leaves(root)

        if not full:
            return VerifyReport(path=str(p), leaves=leaves, header_bits=header_bits, full=False)

        sink = _HashSink()
        bits_out = BitOutputStream(sink)  # type: ignore[arg-type]
        try:
            read_compressed_bits(root, bits_in, bits_out)
        except CorruptPayload as e:
            raise type(e)(f"{p}: {e}") from e
        finally:
            bits_out.close()

    return VerifyReport(
        path=str(p),
        leaves=leaves,
        header_bits=header_bits,
        full=True,
        decoded_bytes=sink.length,
        decoded_sha256=sink.h.hexdigest(),
    )


def verify_roundtrip(source: str | Path, compressed: str | Path) -> VerifyReport:
    """Decode `compressed` and compare it byte-for-byte (sha256) with `source`."""
    rep = verify_compressed_file(compressed, full=True)
    want = _sha256_file(Path(source))
    if rep.decoded_sha256 != want:
        raise VerifyMismatch(
            f"roundtrip mismatch: {compressed} decodifica in {rep.decoded_bytes} byte "
            f"(sha256 {rep.decoded_sha256}), atteso sha256 {want}"
        )
    return rep


def read_code_table(path: str | Path) -> dict[int, str]:
    """Derive the code table from the header embedded in a compressed file."""
    p = Path(path)
    with open_bit_input(p) as bits_in:
        if bits_in.read_bits(BITS_PER_INT) != HUFF_TREE:
            raise BadMagic(f"{p}: magic non valido")
        root = read_tree_header(bits_in)
    return build_code_table(root)
