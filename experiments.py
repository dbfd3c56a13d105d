# experiments.py

"""
Huffman experiments: tree-walk encoding vs code book encoding

Runs repeated experiments over synthetic datasets and reports how close the
Huffman code gets to the entropy bound, plus build/encode/decode timings.

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 64 --exp2_max_kb 256
  python experiments.py --outdir results --runs 5 --exp1_generators uniform256,zipf64,constant
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

import huffman as huff
from bits_utils import pack_bits, shannon_entropy, unpack_bits


PIPELINES = ("tree_walk", "codebook")


# Utilities

def encode_with_codebook(data: bytes, code_map: Dict[int, Tuple[int, ...]]) -> List[int]:
    out: List[int] = []
    for b in data:
        code = code_map.get(b)
        if code is None:
            raise huff.SymbolNotInTreeError(b)
        out.extend(code)
    return out


# Synthetic dataset generators

def _weighted(size: int, symbols: List[int], weights: List[float], seed: int) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.choices(symbols, weights=weights, k=size))

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> bytes:
    return _weighted(size, list(range(alphabet)), [1.0 / ((i + 1) ** s) for i in range(alphabet)], seed)

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    others = [i for i in range(256) if i != dominant]
    weights = [dom_frac] + [(1.0 - dom_frac) / len(others)] * len(others)
    return _weighted(size, [dominant] + others, weights, seed)

def gen_english_like(size: int, seed: int = 0) -> bytes:
    chars = " etaoinshrdlcumwfgypbvkjxq\n"
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch in "etaoinshrdlu":
            weights.append(6.0)
        elif ch in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    return _weighted(size, [ord(c) for c in chars], weights, seed)

def gen_constant(size: int, symbol: int = ord('A')) -> bytes:
    return bytes([symbol]) * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "constant": lambda size, seed: gen_constant(size),
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> bytes:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown generator {name!r}, choose from {', '.join(GENERATOR_REGISTRY)}")
    return fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    pipeline: str  # "tree_walk" or "codebook"
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    compressed_bytes: int
    pad_bits: int
    compression_ratio: float

    avg_code_length: float  # bits per symbol
    entropy_bits: float     # Shannon bound, bits per symbol
    correctness_ok: int  # 1 or 0


def run_one(data: bytes, pipeline: str) -> MetricRow:
    if pipeline not in PIPELINES:
        raise ValueError(f"pipeline must be one of {PIPELINES}, got {pipeline!r}")

    t0 = time.perf_counter_ns()
    table = huff.frequency_table(data)
    root = huff.build_huffman_tree(table)
    code_map = huff.generate_huffman_codes(root) if pipeline == "codebook" else None
    t1 = time.perf_counter_ns()

    if code_map is None:
        bits = huff.encode(data, root)
    else:
        bits = encode_with_codebook(data, code_map)
    packed, pad_bits = pack_bits(bits)
    t2 = time.perf_counter_ns()

    # count tells the decoder where the padding starts, and covers the single-symbol tree
    decoded = bytes(huff.decode(unpack_bits(packed, pad_bits), root, count=len(data)))
    t3 = time.perf_counter_ns()

    build_ms = (t1 - t0) / 1e6
    encode_ms = (t2 - t1) / 1e6
    decode_ms = (t3 - t2) / 1e6

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        pipeline=pipeline,
        unique_symbols=len(table),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        encoded_bits=len(bits),
        compressed_bytes=len(packed),
        pad_bits=pad_bits,
        compression_ratio=len(packed) / max(1, len(data)),
        avg_code_length=len(bits) / max(1, len(data)),
        entropy_bits=shannon_entropy(e.count for e in table),
        correctness_ok=1 if decoded == data else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    names = [f.name for f in fields(MetricRow)]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=names)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in names})


SUMMARY_METRICS = ("compression_ratio", "avg_code_length", "build_ms", "encode_ms", "decode_ms", "total_ms")

def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes, pipeline and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int, str], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.file_size_bytes, r.pipeline)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "pipeline", "n_runs", "entropy_bits"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size_b, pipeline = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "pipeline": pipeline,
                "n_runs": len(items),
                "entropy_bits": statistics.mean(x.entropy_bits for x in items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution" and r.pipeline == "tree_walk"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        return statistics.mean(getattr(r, field) for r in exp_rows if r.dataset_name == dataset)

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "avg_code_length") for d in datasets], marker="o", label="Huffman")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="x", linestyle="--", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Average Code Length vs Entropy")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, pipeline: str, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.file_size_bytes == size and r.pipeline == pipeline]
            return statistics.mean(vals) if vals else float("nan")

        for field, label in (("encode_ms", "Encode"), ("decode_ms", "Decode")):
            plt.figure()
            for p in PIPELINES:
                plt.plot(sizes, [mean_size(s, p, field) for s in sizes], marker="o", label=p)
            plt.xlabel("File Size (bytes)")
            plt.ylabel(f"{label} Time (ms)")
            plt.title(f"Experiment 2: {label} Time vs Size ({dist})")
            plt.legend()
            plt.tight_layout()
            plt.savefig(outdir / f"exp2_{field.split('_')[0]}_time_{dist}.png", dpi=200)
            plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=256, help="Experiment 1 fixed file size in KB")
    ap.add_argument("--exp1_generators", type=str, default="uniform256,zipf64,repetitive90,english_like,constant",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=4, help="Experiment 2 min size in KB (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=1024, help="Experiment 2 max size in KB (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="uniform256,zipf64",
                    help="Comma-separated dataset generator names for experiment 2")

    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                data = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                for pipeline in PIPELINES:
                    row = run_one(data, pipeline)
                    row.exp_name = "exp1_distribution"
                    row.dataset_name = gen_name
                    row.run_id = run_id
                    rows.append(row)

    # Experiment 2: size scaling (powers of 2)
    if not args.no_exp2:
        sizes: List[int] = []
        s = max(1, args.exp2_min_kb) * 1024
        while s <= max(1, args.exp2_max_kb) * 1024:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.exp2_generators):
            for size_b in sizes:
                for run_id in range(1, args.runs + 1):
                    data = generate_dataset(gen_name, size_b, args.seed + 10_000 + size_b + run_id)
                    for pipeline in PIPELINES:
                        row = run_one(data, pipeline)
                        row.exp_name = "exp2_size_scaling"
                        row.dataset_name = gen_name
                        row.run_id = run_id
                        rows.append(row)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    plot_experiment_1(rows, outdir)
    plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
