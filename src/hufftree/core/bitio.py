"""MSB-first bit streams over binary file objects.

Narrow interface used by the codec:
  - BitInputStream.read_bits(n) -> int | EOF
  - BitInputStream.reset()
  - BitOutputStream.write_bits(n, value)
  - BitOutputStream.close()  (pads the final byte with zero bits)
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import IO

from hufftree.core.huff_format import EOF
from hufftree.errors import UsageError


class BitInputStream:
    def __init__(self, fp: IO[bytes]):
        self._fp = fp
        self._rack = 0
        self._avail = 0  # bit validi in _rack
        self.bits_read = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "BitInputStream":
        return cls(io.BytesIO(bytes(data)))

    def read_bits(self, n: int) -> int:
        """Return the next n bits as an unsigned int, or EOF if fewer than n remain."""
        if n < 0:
            raise UsageError(f"read_bits: n negativo: {n}")

        while self._avail < n:
            b = self._fp.read(1)
            if not b:
                # i bit parziali sono consumati comunque
                self._rack = 0
                self._avail = 0
                return EOF
            self._rack = (self._rack << 8) | b[0]
            self._avail += 8

        self._avail -= n
        value = (self._rack >> self._avail) & ((1 << n) - 1)
        self._rack &= (1 << self._avail) - 1
        self.bits_read += n
        return value

    def reset(self) -> None:
        if not self._fp.seekable():
            raise UsageError("reset: input stream non riavvolgibile (serve un file seekable)")
        self._fp.seek(0)
        self._rack = 0
        self._avail = 0
        self.bits_read = 0

    def close(self) -> None:
        self._fp.close()

    def __enter__(self) -> "BitInputStream":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class BitOutputStream:
    def __init__(self, fp: IO[bytes]):
        self._fp = fp
        self._rack = 0
        self._used = 0  # bit in attesa in _rack (0..7)
        self._closed = False
        self._value: bytes | None = None
        self.bits_written = 0

    @classmethod
    def to_buffer(cls) -> "BitOutputStream":
        """In-memory output; the bytes are available from getvalue() after close()."""
        return cls(io.BytesIO())

    def write_bits(self, n: int, value: int) -> None:
        if self._closed:
            raise UsageError("write_bits: stream già chiuso")
        if n < 0:
            raise UsageError(f"write_bits: n negativo: {n}")

        self._rack = (self._rack << n) | (int(value) & ((1 << n) - 1))
        self._used += n
        self.bits_written += n

        out = bytearray()
        while self._used >= 8:
            self._used -= 8
            out.append((self._rack >> self._used) & 0xFF)
        self._rack &= (1 << self._used) - 1
        if out:
            self._fp.write(bytes(out))

    def close(self) -> None:
        if self._closed:
            return
        if self._used:
            self._fp.write(bytes([(self._rack << (8 - self._used)) & 0xFF]))
            self._rack = 0
            self._used = 0
        self._fp.flush()
        if isinstance(self._fp, io.BytesIO):
            self._value = self._fp.getvalue()
        self._fp.close()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def getvalue(self) -> bytes:
        if self._value is None:
            raise UsageError("getvalue: disponibile solo per output in memoria dopo close()")
        return self._value

    def __enter__(self) -> "BitOutputStream":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def open_bit_input(path: str | Path) -> BitInputStream:
    return BitInputStream(Path(path).open("rb"))


def open_bit_output(path: str | Path) -> BitOutputStream:
    return BitOutputStream(Path(path).open("wb"))
