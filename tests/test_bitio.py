from __future__ import annotations

import io

import pytest

from hufftree.core.bitio import BitInputStream, BitOutputStream, open_bit_input, open_bit_output
from hufftree.core.huff_format import EOF
from hufftree.errors import UsageError


class _NoSeek(io.RawIOBase):
    def __init__(self, data: bytes) -> None:
        self._buf = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def read(self, n: int = -1) -> bytes:
        return self._buf.read(n)


def test_write_bits_msb_first_and_zero_padding() -> None:
    out = BitOutputStream.to_buffer()
    out.write_bits(3, 0b101)
    out.write_bits(1, 1)
    out.close()
    # 1011 + 0000 padding
    assert out.getvalue() == bytes([0b10110000])
    assert out.bits_written == 4


def test_write_bits_masks_value_to_width() -> None:
    out = BitOutputStream.to_buffer()
    out.write_bits(4, 0xFF)
    out.write_bits(4, 0)
    out.close()
    assert out.getvalue() == b"\xf0"


def test_write_bits_wider_than_32() -> None:
    out = BitOutputStream.to_buffer()
    out.write_bits(40, 0x0102030405)
    out.close()
    assert out.getvalue() == bytes.fromhex("0102030405")


def test_close_is_idempotent_and_blocks_writes() -> None:
    out = BitOutputStream.to_buffer()
    out.write_bits(8, 0x41)
    out.close()
    out.close()
    assert out.closed
    assert out.getvalue() == b"A"
    with pytest.raises(UsageError):
        out.write_bits(1, 1)


def test_getvalue_requires_close() -> None:
    out = BitOutputStream.to_buffer()
    with pytest.raises(UsageError, match="getvalue"):
        out.getvalue()


def test_negative_width_rejected() -> None:
    with pytest.raises(UsageError):
        BitOutputStream.to_buffer().write_bits(-1, 0)
    with pytest.raises(UsageError):
        BitInputStream.from_bytes(b"\x00").read_bits(-1)


def test_read_bits_fields_and_eof() -> None:
    bits_in = BitInputStream.from_bytes(bytes([0b10110011, 0xFF]))
    assert bits_in.read_bits(1) == 1
    assert bits_in.read_bits(3) == 0b011
    assert bits_in.read_bits(8) == 0b00111111
    assert bits_in.bits_read == 12
    # 4 bits left, asking for 9 -> EOF
    assert bits_in.read_bits(9) == EOF
    assert bits_in.read_bits(1) == EOF


def test_read_bits_32_bit_field() -> None:
    bits_in = BitInputStream.from_bytes(bytes.fromhex("face8201"))
    assert bits_in.read_bits(32) == 0xFACE8201
    assert bits_in.read_bits(8) == EOF


def test_reset_rewinds() -> None:
    bits_in = BitInputStream.from_bytes(b"ab")
    assert bits_in.read_bits(8) == ord("a")
    bits_in.reset()
    assert bits_in.bits_read == 0
    assert bits_in.read_bits(8) == ord("a")
    assert bits_in.read_bits(8) == ord("b")


def test_reset_requires_seekable_stream() -> None:
    bits_in = BitInputStream(_NoSeek(b"abc"))  # type: ignore[arg-type]
    assert bits_in.read_bits(8) == ord("a")
    with pytest.raises(UsageError, match="riavvolgibile"):
        bits_in.reset()


def test_file_helpers(tmp_path) -> None:
    p = tmp_path / "bits.bin"
    with open_bit_output(p) as out:
        out.write_bits(9, 0x1FF)
    assert p.read_bytes() == b"\xff\x80"

    with open_bit_input(p) as bits_in:
        assert bits_in.read_bits(9) == 0x1FF
        assert bits_in.read_bits(7) == 0
        assert bits_in.read_bits(1) == EOF
