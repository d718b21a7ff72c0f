"""
Code file I/O and decoding for Huffman trees built by huffman.build_huffman_tree.

Code file format, one record per leaf, leaves in left-to-right order:

    <symbol as decimal>
    <code as a string of 0 and 1, empty for a single-leaf tree>
"""

import io
import string
from typing import Iterable, Optional, TextIO

from bitio import BitInputStream
from huffman import SYMBOL_COUNT, HuffmanNode

_SINGLE_BYTES = [bytes((b,)) for b in range(SYMBOL_COUNT)]


class FormatError(ValueError):
    """Malformed code file."""


class DecodeError(ValueError):
    """Bits cannot be decoded with the given tree."""


def save_code(root: Optional[HuffmanNode], output: TextIO) -> None:
    """Writes the code of every leaf to output, left subtree before right."""
    stack = [(root, "")] if root is not None else []
    while stack:
        node, code = stack.pop()
        if node.is_leaf():
            output.write(f"{node.symbol}\n{code}\n")
            continue
        # right pushed first so the left subtree is written first
        if node.right is not None:
            stack.append((node.right, code + "1"))
        if node.left is not None:
            stack.append((node.left, code + "0"))


def _parse_symbol(text: str, lineno: int) -> int:
    if not text or any(ch not in string.digits for ch in text):
        raise FormatError(f"line {lineno}: symbol {text!r} is not a decimal number")
    symbol = int(text)
    if symbol >= SYMBOL_COUNT:
        raise FormatError(f"line {lineno}: symbol {symbol} is not a byte value")
    return symbol


def _check_code(code: str, lineno: int) -> None:
    for ch in code:
        if ch not in "01":
            raise FormatError(f"line {lineno}: invalid character {ch!r} in code {code!r}")


def _add_leaf(root: Optional[HuffmanNode], symbol: int, code: str, lineno: int) -> HuffmanNode:
    # walk the code path from the root, creating placeholders where needed
    if code == "":
        if root is not None:
            raise FormatError(f"line {lineno}: empty code for symbol {symbol} but the tree is not empty")
        return HuffmanNode(symbol)

    if root is None:
        root = HuffmanNode()
    elif root.is_leaf():
        raise FormatError(f"line {lineno}: code {code!r} passes through the leaf for symbol {root.symbol}")

    node = root
    last = len(code) - 1
    for i, ch in enumerate(code):
        side = "left" if ch == "0" else "right"
        child = getattr(node, side)
        if i == last:
            if child is not None:
                raise FormatError(f"line {lineno}: code {code!r} for symbol {symbol} is already taken")
            setattr(node, side, HuffmanNode(symbol))
            break
        if child is None:
            child = HuffmanNode()
            setattr(node, side, child)
        elif child.is_leaf():
            raise FormatError(f"line {lineno}: code {code!r} passes through the leaf for symbol {child.symbol}")
        node = child

    return root


def read_code(lines: Iterable[str]) -> Optional[HuffmanNode]:
    """
    Rebuilds a tree from the lines of a code file.

    Records are applied one at a time in the order given, each extending the
    tree along its own path. Raises FormatError on any malformed or
    conflicting record, returns None for an empty file.
    """
    root = None
    symbol = None
    seen = set()
    lineno = 0
    for lineno, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if symbol is None:
            symbol = _parse_symbol(line, lineno)
            if symbol in seen:
                raise FormatError(f"line {lineno}: symbol {symbol} appears twice")
            seen.add(symbol)
        else:
            _check_code(line, lineno)
            root = _add_leaf(root, symbol, line, lineno)
            symbol = None

    if symbol is not None:
        raise FormatError(f"line {lineno}: symbol {symbol} has no code line")
    return root


def translate(root: Optional[HuffmanNode], bits, output) -> int:
    """
    Decodes bits with the tree and writes one byte per decoded symbol.

    bits needs has_next_bit()/next_bit(), output needs write(bytes).
    Reads until the bits run out; an unfinished code at the end is dropped.
    A tree that is a single leaf emits its symbol once per bit. An empty tree
    raises DecodeError when there is anything to decode, and so does a bit
    that leads to a missing child. Returns the number of symbols written.
    """
    if root is None:
        if bits.has_next_bit():
            raise DecodeError("cannot decode with an empty code")
        return 0

    count = 0
    if root.is_leaf():
        out = _SINGLE_BYTES[root.symbol]
        while bits.has_next_bit():
            bits.next_bit()
            output.write(out)
            count += 1
        return count

    node = root
    offset = 0
    while bits.has_next_bit():
        bit = bits.next_bit()
        node = node.right if bit == 1 else node.left
        if node is None:
            raise DecodeError(f"bit {offset}: no code continues with {bit}")
        offset += 1

        if node.is_leaf():
            output.write(_SINGLE_BYTES[node.symbol])
            count += 1
            node = root
    return count


def decode_bytes(root: Optional[HuffmanNode], data: bytes, pad_bits: int = 0) -> bytes:
    output = io.BytesIO()
    translate(root, BitInputStream(data, pad_bits), output)
    return output.getvalue()
