from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from hufftree.core.bitio import (
    BitInputStream,
    BitOutputStream,
    open_bit_input,
    open_bit_output,
)
from hufftree.core.codec_base import Codec, CompressStats, DecodeResult
from hufftree.core.huff_format import BITS_PER_INT, BITS_PER_WORD, EOF, HUFF_TREE, PSEUDO_EOF
from hufftree.core.huffman_tree import (
    HuffmanNode,
    build_code_table,
    build_huffman_tree,
    count_frequencies,
    count_leaves,
)
from hufftree.core.tree_header import read_tree_header, write_tree_header
from hufftree.errors import BadMagic, CorruptPayload, TruncatedBody

DEBUG_LOW = 1
DEBUG_HIGH = 4


def _symbol_label(sym: int) -> str:
    if sym == PSEUDO_EOF:
        return "EOF"
    if 0x20 < sym < 0x7F:
        return repr(chr(sym))
    return f"0x{sym:02x}"


def write_compressed_bits(
    codes: Dict[int, str], bits_in: BitInputStream, bits_out: BitOutputStream
) -> int:
    """Second pass: one code per input byte, then the PSEUDO_EOF code. Return bytes read."""
    packed = {sym: (len(code), int(code, 2) if code else 0) for sym, code in codes.items()}

    n = 0
    while True:
        word = bits_in.read_bits(BITS_PER_WORD)
        if word == EOF:
            break
        bits_out.write_bits(*packed[word])
        n += 1

    bits_out.write_bits(*packed[PSEUDO_EOF])
    return n


def read_compressed_bits(
    root: HuffmanNode, bits_in: BitInputStream, bits_out: BitOutputStream
) -> int:
    """
    Walk the tree bit by bit until the PSEUDO_EOF leaf. Return bytes written.

    A root leaf can only be PSEUDO_EOF (empty input): nothing to read.
    """
    if root.is_leaf:
        return 0

    n = 0
    node = root
    while True:
        bit = bits_in.read_bits(1)
        if bit == EOF:
            raise TruncatedBody(f"body troncato: PSEUDO_EOF non trovato dopo {n} byte")

        child = node.left if bit == 0 else node.right
        assert child is not None
        node = child

        if node.is_leaf:
            if node.symbol == PSEUDO_EOF:
                return n
            bits_out.write_bits(BITS_PER_WORD, node.symbol)
            n += 1
            node = root


@dataclass
class CodecHuffTree(Codec):
    """
    Huffman con albero nell'header (magic HUFF_TREE).

    debug >= DEBUG_LOW prints bit counters on stderr;
    debug >= DEBUG_HIGH also dumps the code table.
    """

    debug: int = 0
    codec_id: str = "huff-tree"

    def _diag(self, level: int, msg: str) -> None:
        if self.debug >= level:
            print(f"[hufftree] {msg}", file=sys.stderr)

    def compress(self, bits_in: BitInputStream, bits_out: BitOutputStream) -> CompressStats:
        counts = count_frequencies(bits_in)
        root = build_huffman_tree(counts)
        codes = build_code_table(root)
        leaves = len(codes)

        if self.debug >= DEBUG_HIGH:
            for sym in sorted(codes):
                self._diag(DEBUG_HIGH, f"code {_symbol_label(sym)} = {codes[sym] or '(empty)'}")

        bits_out.write_bits(BITS_PER_INT, HUFF_TREE)
        header_bits = write_tree_header(root, bits_out)
        self._diag(DEBUG_HIGH, f"header: {header_bits} bit, {leaves} foglie")

        bits_in.reset()
        n = write_compressed_bits(codes, bits_in, bits_out)
        bits_out.close()

        self._diag(
            DEBUG_LOW,
            f"compress: read {bits_in.bits_read} bits, wrote {bits_out.bits_written} bits, "
            f"{leaves} foglie",
        )
        return CompressStats(bytes_in=n, bits_out=bits_out.bits_written, leaves=leaves)

    def decompress(self, bits_in: BitInputStream, bits_out: BitOutputStream) -> DecodeResult:
        try:
            magic = bits_in.read_bits(BITS_PER_INT)
            if magic == EOF:
                raise BadMagic("magic mancante: input più corto di 32 bit")
            if magic != HUFF_TREE:
                raise BadMagic(f"magic non valido: 0x{magic:08x} (atteso 0x{HUFF_TREE:08x})")

            root = read_tree_header(bits_in)
            if self.debug >= DEBUG_HIGH:
                self._diag(DEBUG_HIGH, f"header: {count_leaves(root)} foglie")

            n = read_compressed_bits(root, bits_in, bits_out)
        except CorruptPayload as e:
            bits_out.close()
            partial = bits_out.bits_written // BITS_PER_WORD
            self._diag(DEBUG_LOW, f"decompress failed after {partial} bytes: {e}")
            return DecodeResult(bytes_out=partial, bits_in=bits_in.bits_read, error=e)

        bits_out.close()
        self._diag(
            DEBUG_LOW,
            f"decompress: read {bits_in.bits_read} bits, wrote {bits_out.bits_written} bits",
        )
        return DecodeResult(bytes_out=n, bits_in=bits_in.bits_read)


# -------------------
# Entry points
# -------------------
def compress(
    bits_in: BitInputStream, bits_out: BitOutputStream, *, debug: int = 0
) -> CompressStats:
    return CodecHuffTree(debug=debug).compress(bits_in, bits_out)


def decompress(
    bits_in: BitInputStream, bits_out: BitOutputStream, *, debug: int = 0
) -> DecodeResult:
    return CodecHuffTree(debug=debug).decompress(bits_in, bits_out)


def compress_bytes(data: bytes) -> bytes:
    out = BitOutputStream.to_buffer()
    compress(BitInputStream.from_bytes(data), out)
    return out.getvalue()


def decompress_bytes(blob: bytes) -> bytes:
    """Decode a compressed blob; raises the typed error on failure."""
    out = BitOutputStream.to_buffer()
    decompress(BitInputStream.from_bytes(blob), out).raise_for_error()
    return out.getvalue()


def compress_file(src: str | Path, dst: str | Path, *, debug: int = 0) -> CompressStats:
    with open_bit_input(src) as bits_in, open_bit_output(dst) as bits_out:
        return compress(bits_in, bits_out, debug=debug)


def decompress_file(
    src: str | Path, dst: str | Path, *, keep_partial: bool = False, debug: int = 0
) -> DecodeResult:
    """
    File glue around decompress().

    On a format failure the partial output is removed unless keep_partial.
    """
    dst_p = Path(dst)
    with open_bit_input(src) as bits_in, open_bit_output(dst_p) as bits_out:
        res = decompress(bits_in, bits_out, debug=debug)
    if not res.ok and not keep_partial:
        dst_p.unlink(missing_ok=True)
    return res
