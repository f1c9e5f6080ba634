"""
Benchmark model loading and similarity queries across worker counts.

Builds a synthetic cui2vec-shaped model (random vectors, CSV text), then times:
- load_model: parsing the CSV with N parser threads
- Embeddings.similar: ranking all concepts against sampled targets with N workers

Results for every worker count are checked against the single-worker run.

Usage:
    python benchmark_similar.py
    python benchmark_similar.py --num-concepts 50000 --dimension 500 --workers 1,4,16
"""

import argparse
import time

import numpy as np
from tqdm import tqdm

from cui2vec import int_to_cui, load_model


def synthetic_model(num_concepts: int, dimension: int, seed: int) -> list[str]:
    """CSV lines (with header) for a random model."""
    rng = np.random.default_rng(seed)
    header = ",".join(["cui"] + [f"V{i}" for i in range(1, dimension + 1)])
    lines = [header + "\n"]
    for i in tqdm(range(num_concepts), desc="Generating", unit="concept"):
        features = ",".join(f"{v:.6f}" for v in rng.normal(size=dimension))
        lines.append(f"{int_to_cui(i + 1)},{features}\n")
    return lines


def benchmark_load(lines: list[str], num_workers: int, num_runs: int):
    times = []
    model = None
    for _ in range(num_runs):
        start = time.perf_counter()
        model = load_model(lines, skip_first=True, num_workers=num_workers)
        times.append(time.perf_counter() - start)
    return np.mean(times), np.std(times), model


def benchmark_similar(model, targets: list[str], num_workers: int, num_runs: int):
    times = []
    results = None
    for _ in range(num_runs):
        start = time.perf_counter()
        results = [model.similar(cui, num_workers=num_workers) for cui in targets]
        times.append(time.perf_counter() - start)
    return np.mean(times), np.std(times), results


def main():
    parser = argparse.ArgumentParser(description="Benchmark cui2vec loading and similarity")
    parser.add_argument(
        "--num-concepts",
        type=int,
        default=10_000,
        help="Number of concepts in the synthetic model (default: 10000)",
    )
    parser.add_argument(
        "--dimension",
        type=int,
        default=100,
        help="Vector dimension (default: 100)",
    )
    parser.add_argument(
        "--num-queries",
        type=int,
        default=5,
        help="Number of target CUIs to rank (default: 5)",
    )
    parser.add_argument(
        "--workers",
        type=str,
        default="1,2,4,8",
        help="Comma-separated worker counts to compare (default: 1,2,4,8)",
    )
    parser.add_argument(
        "--num-runs",
        type=int,
        default=3,
        help="Number of runs for averaging (default: 3)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)",
    )
    args = parser.parse_args()
    worker_counts = [int(w) for w in args.workers.split(",") if w.strip()]

    lines = synthetic_model(args.num_concepts, args.dimension, args.seed)
    rng = np.random.default_rng(args.seed)
    targets = [
        int_to_cui(int(i) + 1)
        for i in rng.choice(args.num_concepts, size=min(args.num_queries, args.num_concepts), replace=False)
    ]

    print(f"\n{'='*60}")
    print("Benchmark Configuration:")
    print(f"  Concepts: {args.num_concepts:,}")
    print(f"  Dimension: {args.dimension}")
    print(f"  Queries: {len(targets)}")
    print(f"  Workers: {worker_counts}")
    print(f"  Runs: {args.num_runs}")
    print(f"{'='*60}\n")

    baseline = None
    all_match = True
    for workers in worker_counts:
        print(f"workers={workers}")
        mean, std, model = benchmark_load(lines, workers, args.num_runs)
        print(f"  load:    {mean:.3f}s ± {std:.3f}s ({args.num_concepts / mean:,.0f} lines/sec)")
        mean, std, results = benchmark_similar(model, targets, workers, args.num_runs)
        print(f"  similar: {mean:.3f}s ± {std:.3f}s ({len(targets) / mean:.2f} queries/sec)")

        if baseline is None:
            baseline = results
        elif results != baseline:
            all_match = False
            print("  ✗ results differ from the first worker count")

    print(f"\n{'='*60}")
    print(f"  Determinism: {'PASS' if all_match else 'FAIL'}")
    print(f"{'='*60}")


if __name__ == "__main__":
    main()
