"""
Huffman code experiments

For each synthetic dataset: build the tree, save and re-read the code file,
decode random bits with the re-read tree, and record code quality and timings.

  distribution   average code length vs entropy per dataset (fixed size)
  size_scaling   timings as the input doubles in size
  alphabet       code length vs number of distinct symbols

Writes metrics.csv, summary.csv and PNG charts to --outdir.

  python experiments.py --outdir results --runs 3
  python experiments.py --outdir results --size_kb 16 --max_kb 256 --no_plots
"""

from __future__ import annotations

import argparse
import csv
import dataclasses
import io
import random
import statistics
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

import huffman as huff
from bitio import BitInputStream
from codec import read_code, save_code, translate


def _english_like():
    symbols = b" \n" + b"etaoinshrdlu" + b"cmfwgypbvkjxq" + b"ETAOINSHRDLU"
    weights = [13.0, 1.5] + [6.0] * 12 + [2.0] * 13 + [0.5] * 12
    return list(symbols), weights

# name -> (symbols, weights); weights None means uniform
DATASETS: Dict[str, Tuple[List[int], Optional[List[float]]]] = {
    "uniform256": (list(range(256)), None),
    "zipf128": (list(range(128)), [(i + 1) ** -1.2 for i in range(128)]),
    "repetitive90": (list(range(256)), [0.1 / 255] * 65 + [0.9] + [0.1 / 255] * 190), # 'A' dominates
    "english_like": _english_like(),
}


def generate_dataset(name: str, size: int, seed: int) -> bytes:
    if name not in DATASETS:
        raise ValueError(f"unknown dataset {name!r} (choose from {', '.join(sorted(DATASETS))})")
    symbols, weights = DATASETS[name]
    return bytes(random.Random(seed).choices(symbols, weights, k=size))


def random_bits(n_bits: int, seed: int) -> Tuple[bytes, int, str]:
    # (packed MSB first, pad bits, same bits as a '0'/'1' string)
    n_bytes = (n_bits + 7) // 8
    packed = random.Random(seed).randbytes(n_bytes)
    bitstring = "".join(f"{b:08b}" for b in packed)[:n_bits]
    return packed, n_bytes * 8 - n_bits, bitstring


def decode_consistent(bitstring: str, decoded: bytes, codes: Dict[int, str], root: huff.HuffmanNode) -> bool:
    if root.is_leaf():
        return len(decoded) == len(bitstring) # one symbol per bit
    spelled = "".join(codes[b] for b in decoded)
    leftover = len(bitstring) - len(spelled)
    return bitstring.startswith(spelled) and leftover < max(map(len, codes.values()))


def _ms_since(start: int) -> float:
    return (time.perf_counter_ns() - start) / 1e6


@dataclasses.dataclass
class Measurement:
    experiment: str
    dataset: str
    size: int
    run: int
    symbols: int
    max_code_length: int
    avg_code_length: float
    entropy: float
    build_ms: float
    save_ms: float
    read_ms: float
    decode_ms: float
    roundtrip_ok: int
    decode_ok: int


def measure(data: bytes, seed: int = 0) -> Measurement:
    freqs = huff.count_frequencies(data)

    start = time.perf_counter_ns()
    root = huff.build_huffman_tree(freqs)
    build_ms = _ms_since(start)
    if root is None:
        raise ValueError("dataset is empty")
    codes = huff.generate_huffman_codes(root)
    avg = huff.average_code_length(codes, freqs)

    start = time.perf_counter_ns()
    buf = io.StringIO()
    save_code(root, buf)
    save_ms = _ms_since(start)

    start = time.perf_counter_ns()
    reread = read_code(io.StringIO(buf.getvalue()))
    read_ms = _ms_since(start)

    # as many random bits as the dataset takes once coded
    packed, pad_bits, bitstring = random_bits(max(1, round(avg * len(data))), seed)
    out = io.BytesIO()
    start = time.perf_counter_ns()
    translate(reread, BitInputStream(packed, pad_bits), out)
    decode_ms = _ms_since(start)

    return Measurement(
        experiment="", dataset="", size=len(data), run=0,
        symbols=len(codes),
        max_code_length=max(map(len, codes.values())),
        avg_code_length=avg,
        entropy=huff.entropy(freqs),
        build_ms=build_ms, save_ms=save_ms, read_ms=read_ms, decode_ms=decode_ms,
        roundtrip_ok=int(huff.generate_huffman_codes(reread) == codes),
        decode_ok=int(decode_consistent(bitstring, out.getvalue(), codes, root)),
    )


def run_experiments(args) -> List[Measurement]:
    plan = [] # (experiment, dataset name, size, data factory)
    size = args.size_kb * 1024
    for name in args.datasets.split(","):
        plan.append(("distribution", name, size, lambda seed, n=name, s=size: generate_dataset(n, s, seed)))

    s = 1024
    while s <= args.max_kb * 1024:
        plan.append(("size_scaling", args.scaling_dataset, s,
                     lambda seed, s=s: generate_dataset(args.scaling_dataset, s, seed)))
        s *= 2

    for alphabet in (2, 4, 8, 16, 32, 64, 128, 256):
        plan.append(("alphabet", f"uniform{alphabet}", size,
                     lambda seed, a=alphabet: bytes(random.Random(seed).choices(range(a), k=size))))

    results = []
    for i, (experiment, name, n, make) in enumerate(plan):
        for run in range(1, args.runs + 1):
            seed = args.seed + 1000 * i + run
            m = measure(make(seed), seed)
            m.experiment, m.dataset, m.run = experiment, name, run
            results.append(m)
    return results


def write_metrics(path: Path, results: List[Measurement]) -> None:
    fields = [f.name for f in dataclasses.fields(Measurement)]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        w.writerows(dataclasses.asdict(m) for m in results)


SUMMARY_FIELDS = ("avg_code_length", "entropy", "build_ms", "save_ms", "read_ms", "decode_ms")


def write_summary(path: Path, results: List[Measurement]) -> None:
    groups: Dict[Tuple[str, str, int], List[Measurement]] = {}
    for m in results:
        groups.setdefault((m.experiment, m.dataset, m.size), []).append(m)

    header = ["experiment", "dataset", "size", "runs"]
    header += [f"{f}_{stat}" for f in SUMMARY_FIELDS for stat in ("mean", "stdev")]
    header += ["ok_rate"]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(header)
        for key, ms in sorted(groups.items()):
            row = list(key) + [len(ms)]
            for field in SUMMARY_FIELDS:
                vals = [getattr(m, field) for m in ms]
                row += [statistics.mean(vals), statistics.stdev(vals) if len(vals) > 1 else 0.0]
            row.append(sum(m.roundtrip_ok and m.decode_ok for m in ms) / len(ms))
            w.writerow(row)


def _means(results: List[Measurement], experiment: str, key: str, field: str):
    xs: Dict = {}
    for m in results:
        if m.experiment == experiment:
            xs.setdefault(getattr(m, key), []).append(getattr(m, field))
    keys = sorted(xs)
    return keys, [statistics.mean(xs[k]) for k in keys]


def plot(results: List[Measurement], outdir: Path) -> None:
    fig, ax = plt.subplots()
    for field in ("avg_code_length", "entropy"):
        names, ys = _means(results, "distribution", "dataset", field)
        ax.plot(names, ys, marker="o", label=field)
    ax.axhline(8, linestyle="--", color="gray", label="fixed 8-bit")
    ax.set_ylabel("bits per symbol")
    ax.set_title("Code length by distribution")
    ax.legend()
    fig.tight_layout()
    fig.savefig(outdir / "distribution.png", dpi=150)
    plt.close(fig)

    fig, ax = plt.subplots()
    for field in ("build_ms", "save_ms", "read_ms", "decode_ms"):
        sizes, ys = _means(results, "size_scaling", "size", field)
        ax.plot(sizes, ys, marker="o", label=field)
    ax.set_xscale("log", base=2)
    ax.set_xlabel("input size (bytes)")
    ax.set_ylabel("ms")
    ax.set_title("Time vs input size")
    ax.legend()
    fig.tight_layout()
    fig.savefig(outdir / "size_scaling.png", dpi=150)
    plt.close(fig)

    fig, ax = plt.subplots()
    for field in ("avg_code_length", "entropy"):
        counts, ys = _means(results, "alphabet", "symbols", field)
        ax.plot(counts, ys, marker="o", label=field)
    ax.set_xscale("log", base=2)
    ax.set_xlabel("distinct symbols")
    ax.set_ylabel("bits per symbol")
    ax.set_title("Code length vs alphabet size")
    ax.legend()
    fig.tight_layout()
    fig.savefig(outdir / "alphabet.png", dpi=150)
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Measure Huffman code quality and speed on synthetic data")
    ap.add_argument("--outdir", default="results", help="where CSV files and charts go")
    ap.add_argument("--runs", type=int, default=3, help="runs per configuration")
    ap.add_argument("--seed", type=int, default=123)
    ap.add_argument("--size_kb", type=int, default=64, help="input size for the distribution and alphabet experiments")
    ap.add_argument("--max_kb", type=int, default=512, help="largest input in the size scaling experiment")
    ap.add_argument("--datasets", default=",".join(DATASETS), help="comma-separated datasets for the distribution experiment")
    ap.add_argument("--scaling_dataset", default="zipf128", choices=sorted(DATASETS))
    ap.add_argument("--no_plots", action="store_true")
    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    results = run_experiments(args)
    write_metrics(outdir / "metrics.csv", results)
    write_summary(outdir / "summary.csv", results)
    if not args.no_plots:
        plot(results, outdir)

    ok = sum(m.roundtrip_ok and m.decode_ok for m in results)
    print(f"{len(results)} measurements written to {outdir.resolve()}")
    print(f"Correct: {ok}/{len(results)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
