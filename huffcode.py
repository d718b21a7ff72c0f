"""
Command line front end for Huffman code files.

How to run:
  huffcode make-code notes.txt -o notes.code
  huffcode show notes.code
  huffcode decode notes.code notes.bits -o notes.out --pad-bits 3
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import huffman as huff
from bitio import BitInputStream
from codec import DecodeError, FormatError, read_code, save_code, translate


def _printable(symbol: int) -> str:
    ch = chr(symbol)
    return ch if ch.isprintable() and symbol < 128 else "."


def cmd_make_code(args) -> int:
    src = Path(args.input)
    dst = Path(args.output) if args.output else src.with_suffix(".code")
    if dst.resolve() == src.resolve():
        raise ValueError(f"output {dst} would overwrite the input")

    frequencies = huff.count_frequencies(src.read_bytes())
    root = huff.build_huffman_tree(frequencies)
    with dst.open("w", encoding="ascii", newline="\n") as f:
        save_code(root, f)

    codes = huff.generate_huffman_codes(root)
    print(f"Wrote {len(codes)} codes to {dst}")
    print(f"Average code length: {huff.average_code_length(codes, frequencies):.3f} bits "
          f"(entropy {huff.entropy(frequencies):.3f})")
    return 0


def cmd_show(args) -> int:
    with open(args.codefile, "r", encoding="ascii") as f:
        root = read_code(f)

    codes = huff.generate_huffman_codes(root)
    print(f"{'symbol':>6}  {'char':4}  {'length':>6}  code")
    for symbol, code in sorted(codes.items(), key=lambda item: (len(item[1]), item[0])):
        print(f"{symbol:>6}  {_printable(symbol):4}  {len(code):>6}  {code}")
    leaves, internal = huff.count_nodes(root)
    print(f"{leaves} leaves, {internal} internal nodes")
    return 0


def cmd_decode(args) -> int:
    with open(args.codefile, "r", encoding="ascii") as f:
        root = read_code(f)

    bits = BitInputStream(Path(args.bitsfile).read_bytes(), args.pad_bits)
    if args.output:
        with open(args.output, "wb") as out:
            count = translate(root, bits, out)
        print(f"Decoded {count} symbols to {args.output}", file=sys.stderr)
    else:
        translate(root, bits, sys.stdout.buffer)
        sys.stdout.flush()
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huffcode", description="Build, inspect and apply Huffman code files")
    sub = ap.add_subparsers(dest="command")

    mk = sub.add_parser("make-code", help="Build a code file from the byte frequencies of a file")
    mk.add_argument("input", help="File whose byte frequencies define the code")
    mk.add_argument("-o", "--output", help="Code file to write (default: INPUT with .code suffix)")
    mk.set_defaults(func=cmd_make_code)

    show = sub.add_parser("show", help="List the codes in a code file")
    show.add_argument("codefile", help="Code file to read")
    show.set_defaults(func=cmd_show)

    dec = sub.add_parser("decode", help="Decode a bit file with a code file")
    dec.add_argument("codefile", help="Code file to read")
    dec.add_argument("bitsfile", help="Packed bits, most significant bit first")
    dec.add_argument("-o", "--output", help="Output file (default: stdout)")
    dec.add_argument("--pad-bits", type=int, default=0, help="Filler bits at the end of the last byte (0-7)")
    dec.set_defaults(func=cmd_decode)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if not args.command:
        ap.print_help()
        return 1

    try:
        return args.func(args)
    except (FormatError, DecodeError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
