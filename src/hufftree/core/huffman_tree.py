from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional

from hufftree.core.bitio import BitInputStream
from hufftree.core.huff_format import ALPH_SIZE, BITS_PER_WORD, EOF, PSEUDO_EOF

# -------------------
# Strutture di base Huffman
# -------------------
@dataclass
class HuffmanNode:
    weight: int
    symbol: Optional[int] = None  # 0-256 per foglie, None per interni
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


def count_frequencies(bits_in: BitInputStream) -> List[int]:
    """
    Legge tutto l'input a parole di 8 bit.
    counts[PSEUDO_EOF] vale sempre 1, anche per input vuoto.
    """
    counts = [0] * (ALPH_SIZE + 1)
    counts[PSEUDO_EOF] = 1
    while True:
        word = bits_in.read_bits(BITS_PER_WORD)
        if word == EOF:
            break
        counts[word] += 1
    return counts


def build_huffman_tree(counts: List[int]) -> HuffmanNode:
    """
    Merge greedy classico, deterministico.

    Heap keyed on (weight, seq): leaves are pushed in ascending symbol order and
    every merged node gets the next seq, so ties pop first-inserted-first.
    """
    heap: List[tuple[int, int, HuffmanNode]] = []
    counter = itertools.count()

    for sym, f in enumerate(counts):
        if f > 0:
            node = HuffmanNode(weight=f, symbol=sym)
            heapq.heappush(heap, (f, next(counter), node))

    if not heap:
        raise ValueError("build_huffman_tree: nessun simbolo con frequenza > 0")

    while len(heap) > 1:
        f1, _, n1 = heapq.heappop(heap)
        f2, _, n2 = heapq.heappop(heap)
        parent = HuffmanNode(weight=f1 + f2, symbol=None, left=n1, right=n2)
        heapq.heappush(heap, (parent.weight, next(counter), parent))

    # Caso degenere: una sola foglia => root foglia, codice vuoto
    return heap[0][2]


def build_code_table(root: HuffmanNode) -> Dict[int, str]:
    codes: Dict[int, str] = {}

    # DFS iterativa: right pushed first so left is visited first
    stack: List[tuple[HuffmanNode, str]] = [(root, "")]
    while stack:
        node, path = stack.pop()
        if node.is_leaf:
            if node.symbol is None:
                raise ValueError("build_code_table: foglia senza simbolo")
            codes[node.symbol] = path
            continue
        if node.left is None or node.right is None:
            raise ValueError("build_code_table: nodo interno con un solo figlio")
        stack.append((node.right, path + "1"))
        stack.append((node.left, path + "0"))

    return codes


def count_leaves(root: HuffmanNode) -> int:
    n = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            n += 1
            continue
        for child in (node.left, node.right):
            if child is not None:
                stack.append(child)
    return n
