"""Self-describing tree header.

Preorder bitstream:
  internal -> 0, left subtree, right subtree
  leaf     -> 1, value (LEAF_VALUE_BITS)

No node count is transmitted: every internal node consumes exactly two
subtrees, so the header ends when the last pending subtree completes.
"""

from __future__ import annotations

from hufftree.core.bitio import BitInputStream, BitOutputStream
from hufftree.core.huff_format import EOF, LEAF_VALUE_BITS, PSEUDO_EOF
from hufftree.core.huffman_tree import HuffmanNode
from hufftree.errors import MalformedHeader, TruncatedHeader


def write_tree_header(root: HuffmanNode, bits_out: BitOutputStream) -> int:
    """Write the preorder header; return the number of header bits written."""
    written = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            if node.symbol is None or not (0 <= node.symbol <= PSEUDO_EOF):
                raise ValueError(f"write_tree_header: simbolo foglia non valido: {node.symbol}")
            bits_out.write_bits(1, 1)
            bits_out.write_bits(LEAF_VALUE_BITS, node.symbol)
            written += 1 + LEAF_VALUE_BITS
            continue
        if node.left is None or node.right is None:
            raise ValueError("write_tree_header: nodo interno con un solo figlio")
        bits_out.write_bits(1, 0)
        written += 1
        stack.append(node.right)
        stack.append(node.left)
    return written


def read_tree_header(bits_in: BitInputStream) -> HuffmanNode:
    """Rebuild the tree from a preorder header.

    Weights are not transmitted; every node is rebuilt with weight 0.

    Raises TruncatedHeader if input ends before the tree is complete and
    MalformedHeader for structurally invalid trees.
    """
    seen: set[int] = set()

    # Stack of internal nodes still waiting for a child (left first, then right).
    pending: list[HuffmanNode] = []
    root: HuffmanNode | None = None

    while True:
        bit = bits_in.read_bits(1)
        if bit == EOF:
            raise TruncatedHeader("header troncato: input finito prima della fine dell'albero")

        if bit == 0:
            node = HuffmanNode(weight=0)
        else:
            value = bits_in.read_bits(LEAF_VALUE_BITS)
            if value == EOF:
                raise TruncatedHeader("header troncato: valore foglia incompleto")
            if value > PSEUDO_EOF:
                raise MalformedHeader(f"header: valore foglia fuori range: {value}")
            if value in seen:
                raise MalformedHeader(f"header: simbolo duplicato: {value}")
            seen.add(value)
            node = HuffmanNode(weight=0, symbol=value)

        if pending:
            parent = pending[-1]
            if parent.left is None:
                parent.left = node
            else:
                parent.right = node
                pending.pop()
        else:
            root = node

        if node.symbol is None:
            pending.append(node)

        if not pending:
            break

    assert root is not None

    if PSEUDO_EOF not in seen:
        raise MalformedHeader("header: albero senza PSEUDO_EOF")

    return root
