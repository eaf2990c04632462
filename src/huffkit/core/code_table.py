from __future__ import annotations

from collections.abc import Mapping

from huffkit.core.tree import SENTINEL_SYMBOL, HuffmanNode, Internal, Leaf

CodeTable = dict[int, tuple[int, ...]]


def build_code_table(root: HuffmanNode) -> CodeTable:
    """Derive symbol -> code bits with a single depth-first walk.

    Left appends 0, right appends 1; a code is recorded at each leaf.
    The sentinel leaf is never recorded: the empty tree gives an empty
    table, the one-symbol tree gives a single 1-bit entry.
    """
    codes: CodeTable = {}

    stack: list[tuple[HuffmanNode, tuple[int, ...]]] = [(root, ())]
    while stack:
        node, path = stack.pop()
        if isinstance(node, Leaf):
            if node.symbol != SENTINEL_SYMBOL:
                codes[node.symbol] = path
            continue
        # un nodo interno ha sempre esattamente due figli
        assert isinstance(node, Internal), f"nodo inatteso: {node!r}"
        assert node.left is not None and node.right is not None, "nodo interno con un solo figlio"
        stack.append((node.right, path + (1,)))
        stack.append((node.left, path + (0,)))

    return codes


def code_lengths(table: CodeTable) -> dict[int, int]:
    return {sym: len(bits) for sym, bits in table.items()}


def encoded_bit_length(freq: Mapping[int, int], table: CodeTable) -> int:
    """Total payload bits for ``freq`` under ``table``."""
    return sum(f * len(table[sym]) for sym, f in freq.items() if f > 0)


def is_prefix_free(table: CodeTable) -> bool:
    words = sorted(table.values())
    # dopo l'ordinamento, un prefisso precede sempre (subito) le sue estensioni
    for a, b in zip(words, words[1:]):
        if b[: len(a)] == a:
            return False
    return True


def format_code(bits: tuple[int, ...]) -> str:
    return "".join("1" if b else "0" for b in bits)
