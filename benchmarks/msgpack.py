"""
Benchmark picopack encode / decode.
Compares time per call and peak memory (tracemalloc) per run.

Timing uses multiple runs and median for more consistent results; warmup reduces
cold-cache effects. Use --iter, --warmup, --runs to tune.

Run from repo root:

  PYTHONPATH=src python benchmarks/msgpack.py
  PYTHONPATH=src python benchmarks/msgpack.py --ops encode,decode
  PYTHONPATH=src python benchmarks/msgpack.py --iter 5000 --runs 7   # slower, more stable

Or after pip install -e .:

  python benchmarks/msgpack.py
"""

from __future__ import annotations

import argparse
import gc
import os
import sys
import time
import tracemalloc

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_src = os.path.join(_root, "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

from picopack import decode, encode  # noqa: E402
from picopack.codec import cursor  # noqa: E402

# Sample payloads: various shapes and sizes
SAMPLES: list[tuple[object, str]] = [
    (None, "null"),
    (42, "int"),
    (2**40, "int 64"),
    (1.5, "float32"),
    (0.1, "float64"),
    (True, "bool"),
    ("hello", "str short"),
    (b"bytes", "bytes"),
    ({"a": 1, "b": 2}, "dict 2"),
    ([1, 2, 3], "list 3"),
    ({"k": "v", "n": 0, "b": True}, "dict mixed"),
    (list(range(100)), "list 100"),
    ({"x": "y" * 50}, "dict str val"),
    ([{"i": i} for i in range(20)], "list of dicts"),
]

N_TIME = 2000
N_MEM = 500
WARMUP_DEFAULT = 200
TIMING_RUNS_DEFAULT = 5


def _operations() -> list[tuple[str, str, object, object]]:
    """(id, label, callable, payload transform). The transform turns a sample
    into the argument the callable expects."""
    return [
        ("encode", "encode", encode, lambda v: v),
        ("decode", "decode", decode, encode),
        ("roundtrip", "encode+decode", lambda v: decode(encode(v)), lambda v: v),
    ]


def _time_per_call_median(
    fn: object,
    payload: object,
    n: int,
    warmup: int = WARMUP_DEFAULT,
    runs: int = TIMING_RUNS_DEFAULT,
    disable_gc: bool = True,
) -> tuple[float, float]:
    """
    Return (median time per call in seconds, std in seconds).
    Runs warmup, then `runs` timing loops of `n` iterations each; median of per-run
    mean time is used to reduce impact of outliers (GC, scheduling).
    """
    for _ in range(warmup):
        fn(payload)
    run_times: list[float] = []
    was_enabled = gc.isenabled()
    if disable_gc:
        gc.disable()
    try:
        for _ in range(runs):
            start = time.perf_counter()
            for _ in range(n):
                fn(payload)
            elapsed = time.perf_counter() - start
            run_times.append(elapsed / n)
    finally:
        if disable_gc and was_enabled:
            gc.enable()
    run_times.sort()
    median = run_times[runs // 2]
    mean = sum(run_times) / runs
    variance = sum((t - mean) ** 2 for t in run_times) / runs
    return median, variance**0.5


def _peak_memory_kb(fn: object, payload: object, n: int) -> float:
    tracemalloc.start()
    tracemalloc.reset_peak()
    for _ in range(n):
        fn(payload)
    _current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return peak / 1024.0


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark picopack encode/decode")
    parser.add_argument(
        "--ops",
        default="all",
        metavar="IDS",
        help="Comma-separated operations (encode,decode,roundtrip) or 'all' (default)",
    )
    parser.add_argument(
        "--iter",
        type=int,
        default=N_TIME,
        metavar="N",
        help=f"Iterations per timing run (default {N_TIME}); higher = more stable",
    )
    parser.add_argument(
        "--warmup",
        type=int,
        default=WARMUP_DEFAULT,
        metavar="N",
        help=f"Warmup iterations before each timing run (default {WARMUP_DEFAULT})",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=TIMING_RUNS_DEFAULT,
        metavar="N",
        help=f"Number of timing runs per op/payload; median is used (default {TIMING_RUNS_DEFAULT})",
    )
    parser.add_argument(
        "--no-disable-gc",
        action="store_true",
        help="Do not disable GC during timing (can make results noisier)",
    )
    parser.add_argument(
        "--show-std",
        action="store_true",
        help="Show ± std in time table (spread across runs)",
    )
    args = parser.parse_args()
    n_time = max(1, args.iter)
    warmup = max(0, args.warmup)
    runs = max(1, args.runs)
    disable_gc = not args.no_disable_gc

    ops = _operations()
    if args.ops.strip().lower() != "all":
        requested = {s.strip().lower() for s in args.ops.split(",") if s.strip()}
        ops = [op for op in ops if op[0] in requested]
    if not ops:
        print("No operations selected. Check --ops.")
        sys.exit(1)

    compiled = not cursor.__file__.endswith(".py")
    print("Benchmark: picopack")
    print("  " + ", ".join(label for _, label, _, _ in ops))
    print(f"  Codec modules compiled: {compiled}")
    print(
        f"  Timing: n={n_time}, warmup={warmup}, runs={runs} (median), disable_gc={disable_gc}"
    )
    print()

    # Sanity: every sample survives the round trip
    for payload, sample_label in SAMPLES:
        got, _ = decode(encode(payload))
        assert got == payload, f"{sample_label}: mismatch {payload!r} vs {got!r}"
    print("  Sanity check: all sample payloads round-trip.")
    print()

    col_width = 16 if args.show_std else 14
    header = f"  {'payload':<16} {'n':<6}"
    for _, label, _, _ in ops:
        header += f" {label[: col_width - 2]:<{col_width}}"

    print("  --- Time per call (ms, median over runs) ---")
    print(header)
    print("  " + "-" * (24 + len(ops) * (col_width + 1)))
    totals = [0.0] * len(ops)
    for payload, sample_label in SAMPLES:
        row_str = f"  {sample_label:<16} {n_time:<6}"
        for idx, (_, _, fn, prepare) in enumerate(ops):
            median_sec, std_sec = _time_per_call_median(
                fn,
                prepare(payload),
                n_time,
                warmup=warmup,
                runs=runs,
                disable_gc=disable_gc,
            )
            totals[idx] += median_sec * 1000
            if args.show_std:
                row_str += f" {median_sec * 1000:.4f}±{std_sec * 1000:.4f}"
            else:
                row_str += f" {median_sec * 1000:<{col_width}.4f}"
        print(row_str)
    print()

    print("  --- Peak memory (KiB) during run ---")
    print(header)
    print("  " + "-" * (24 + len(ops) * (col_width + 1)))
    for payload, sample_label in SAMPLES:
        row_str = f"  {sample_label:<16} {N_MEM:<6}"
        for _, _, fn, prepare in ops:
            peak = _peak_memory_kb(fn, prepare(payload), N_MEM)
            row_str += f" {peak:<{col_width}.2f}"
        print(row_str)
    print()

    print("  --- Summary ---")
    for idx, (op_id, label, _, _) in enumerate(ops):
        print(f"  [{op_id}] {label}: avg {totals[idx] / len(SAMPLES):.4f} ms")


if __name__ == "__main__":
    main()
