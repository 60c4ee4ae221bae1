from __future__ import annotations

from typing import Final

# -------------------------------------------------------------------
# Wire format
#
#   MAGIC(32) | HEADER(preorder tree) | BODY(codes..., code(PSEUDO_EOF)) | PAD(0..7)
#
# HEADER: internal -> bit 0, left, right
#         leaf     -> bit 1, value(9)
# -------------------------------------------------------------------

BITS_PER_WORD: Final = 8
BITS_PER_INT: Final = 32
ALPH_SIZE: Final = 1 << BITS_PER_WORD
PSEUDO_EOF: Final = ALPH_SIZE

# 8 bit di letterale + il sentinel
LEAF_VALUE_BITS: Final = BITS_PER_WORD + 1

# Format family. Only the tree-header variant is written/accepted.
HUFF_NUMBER: Final = 0xFACE8200
HUFF_TREE: Final = HUFF_NUMBER | 1

# End-of-input sentinel returned by BitInputStream.read_bits()
EOF: Final = -1
