import heapq
import itertools
import math
from typing import List, Mapping, Sequence, Tuple, Union

SYMBOL_COUNT = 256 # byte alphabet

Frequencies = Union[Sequence[int], Mapping[int, int]]


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol=None, frequency=0, left=None, right=None, order=0):
        self.symbol = symbol    # byte for leaves, None for internal nodes
        self.frequency = frequency # merge weight, 0 when read back from a code file
        self.left = left
        self.right = right
        self.order = order # tie-break for equal weights

    def __lt__(self, other):
        return (self.frequency, self.order) < (other.frequency, other.order)

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode(symbol={self.symbol}, frequency={self.frequency})"
        return f"HuffmanNode(frequency={self.frequency})"

    def is_leaf(self) -> bool:
        return self.symbol is not None


def _positive_items(frequencies: Frequencies) -> List[Tuple[int, int]]:
    if isinstance(frequencies, Mapping):
        items = sorted(frequencies.items())
    else:
        items = list(enumerate(frequencies))
    out = []
    for symbol, frequency in items:
        if frequency <= 0:
            continue # never part of the code
        if not 0 <= symbol < SYMBOL_COUNT:
            raise ValueError(f"symbol {symbol} is not a byte value")
        out.append((symbol, frequency))
    return out


def count_frequencies(data: bytes) -> List[int]: # frequency array indexed by byte value
    table = [0] * SYMBOL_COUNT
    for b in data:
        table[b] += 1
    return table


def build_huffman_tree(frequencies): # frequencies: list indexed by symbol, or dict of symbol -> frequency
    # leaves in ascending symbol order, merged nodes numbered after them;
    # equal weights pop the lower number first, first popped becomes left
    order = itertools.count()
    priority_queue = [HuffmanNode(symbol, frequency, order=next(order)) for symbol, frequency in _positive_items(frequencies)]
    heapq.heapify(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency, left, right, next(order)) # internal node with combined frequency
        heapq.heappush(priority_queue, merged_node)

    return priority_queue[0] if priority_queue else None # None when no symbol has a positive frequency


def generate_huffman_codes(root): # root: root of the Huffman tree
    codes = {}
    def generate_codes_helper(node, current_code): # recursive helper function to traverse the tree and generate codes
        if node is None:
            return

        # Leaf node -> assign code ("" when the root itself is a leaf)
        if node.is_leaf():
            codes[node.symbol] = current_code
            return

        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes


def count_nodes(root): # returns (leaves, internal nodes)
    leaves = internal = 0
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        if node.is_leaf():
            leaves += 1
            continue
        internal += 1
        for child in (node.left, node.right):
            if child is not None:
                stack.append(child)
    return leaves, internal


def average_code_length(codes, frequencies) -> float: # bits per symbol when every symbol is written with its code
    items = _positive_items(frequencies)
    total = sum(frequency for _, frequency in items)
    if total == 0:
        return 0.0
    return sum(frequency * len(codes[symbol]) for symbol, frequency in items) / total


def entropy(frequencies) -> float: # Shannon entropy in bits per symbol, lower bound for average_code_length
    items = _positive_items(frequencies)
    total = sum(frequency for _, frequency in items)
    h = 0.0
    for _, frequency in items:
        p = frequency / total
        h -= p * math.log2(p)
    return h
