"""Reference byte codecs used by `hufftree bench` to put Huffman ratios in context."""

from __future__ import annotations

import zlib
from dataclasses import dataclass

try:
    import zstandard as zstd  # type: ignore
except Exception:  # pragma: no cover
    zstd = None


def have_zstd() -> bool:
    return zstd is not None


class CodecZlib:
    """zlib/DEFLATE byte codec (no external deps)."""

    codec_id: str = "zlib"

    def __init__(self, level: int = 9):
        if not (0 <= level <= 9):
            raise ValueError(f"zlib level must be 0..9, got {level}")
        self.level = level

    def compress(self, data: bytes) -> bytes:
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("data must be bytes")
        return zlib.compress(bytes(data), self.level)

    def decompress(self, comp: bytes) -> bytes:
        if not isinstance(comp, (bytes, bytearray)):
            raise TypeError("comp must be bytes")
        return zlib.decompress(bytes(comp))


@dataclass
class CodecZstd:
    """zstd byte codec (optional dependency)."""

    level: int = 19
    codec_id: str = "zstd"

    def _require(self) -> None:
        if zstd is None:
            raise RuntimeError(
                "Modulo 'zstandard' non disponibile. Installa con: python3 -m pip install zstandard"
            )

    def compress(self, data: bytes) -> bytes:
        self._require()
        c = zstd.ZstdCompressor(level=int(self.level))
        return c.compress(data)

    def decompress(self, data: bytes) -> bytes:
        self._require()
        return zstd.ZstdDecompressor().decompress(data)


def reference_codecs() -> list[CodecZlib | CodecZstd]:
    """Codecs available in this environment, deterministic order."""
    out: list[CodecZlib | CodecZstd] = [CodecZlib(level=9)]
    if have_zstd():
        out.append(CodecZstd(level=19))
    return out
