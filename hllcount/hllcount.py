#!/usr/bin/env python
from __future__ import annotations
import sys
import os
import argparse
import warnings
from multiprocessing import Pool
from typing import Iterator, List, Optional, Tuple
from hllcount.lib.hyperloglog import HyperLogLog
from hllcount.lib.exact import ExactCounter
from hllcount.lib.hashing import DEFAULT_SEED
from hllcount.lib.precision import Precision, DEFAULT_PRECISION

STDIN_PATH = '-'
UNION_LABEL = '<union>'

SketchPair = Tuple[HyperLogLog, Optional[ExactCounter]]


def read_lines(filepath: str) -> Iterator[bytes]:
    """Yield the raw lines of a file (or stdin for '-') without line endings.

    Lines stay undecoded so input in any encoding can be counted.
    """
    if filepath == STDIN_PATH:
        for line in sys.stdin.buffer:
            yield line.rstrip(b'\r\n')
        return
    with open(filepath, 'rb') as f:
        for line in f:
            yield line.rstrip(b'\r\n')


def process_file(filepath: str, precision: int = DEFAULT_PRECISION,
                 seed: int = DEFAULT_SEED, exact: bool = False,
                 debug: bool = False) -> SketchPair:
    """Sketch the distinct lines of one file.

    Args:
        filepath: Path to the input file, or '-' for stdin
        precision: Precision for HyperLogLog sketching
        seed: Seed for the default hasher
        exact: Also count the distinct lines exactly
        debug: Print progress information

    Returns:
        The HyperLogLog sketch and, when exact is set, an ExactCounter
    """
    sketch = HyperLogLog(precision=precision, seed=seed)
    counter = ExactCounter() if exact else None

    num_lines = 0
    for line in read_lines(filepath):
        sketch.insert(line)
        if counter is not None:
            counter.insert(line)
        num_lines += 1

    if num_lines == 0:
        warnings.warn(f"{filepath} contains no lines", RuntimeWarning)
    if debug:
        print(f"Sketched {num_lines} lines from {filepath}", file=sys.stderr)
    return sketch, counter


def precision_arg(text: str) -> Precision:
    """argparse type for --precision."""
    try:
        return Precision(int(text))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    arg_parser = argparse.ArgumentParser(
        description="""Estimate the number of distinct lines in each input file with HyperLogLog.

        Each line, without its line ending, is one element. Use '-' to read stdin.
        Output is tab-separated: file, estimate (and exact, relative_error with --exact).
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    arg_parser.add_argument('filepaths', nargs='+',
                       help="Files to sketch ('-' for stdin)")
    arg_parser.add_argument("--precision", "-p", type=precision_arg, default=DEFAULT_PRECISION,
                       help="Precision for HyperLogLog sketching (4-16)")
    arg_parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed for hashing")
    arg_parser.add_argument("--exact", action="store_true",
                       help="Also count distinct lines exactly and report the relative error")
    arg_parser.add_argument("--union", action="store_true",
                       help="Add a row estimating the distinct lines across all inputs")
    arg_parser.add_argument("--threads", type=int, default=1, help="Number of worker processes")
    arg_parser.add_argument('--output', '-o', type=str, default=None,
                       help='Output file (default: stdout)')
    arg_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    return arg_parser.parse_args(argv)


def relative_error(estimate: float, exact: float) -> float:
    if exact == 0:
        return 0.0 if estimate == 0 else float('inf')
    return abs(estimate - exact) / exact


def format_row(label: str, sketch: HyperLogLog, counter: Optional[ExactCounter]) -> List[str]:
    estimate = sketch.estimate_cardinality()
    row = [label, f"{estimate:.2f}"]
    if counter is not None:
        exact = counter.estimate_cardinality()
        row.extend([str(int(exact)), f"{relative_error(estimate, exact):.4f}"])
    return row


def write_results(rows: List[List[str]], exact: bool, output: Optional[str] = None) -> None:
    """Write result rows as tab-separated text with a header.

    Args:
        rows: Rows produced by format_row
        exact: Whether rows carry the exact and relative_error columns
        output: Output file path, or None for stdout
    """
    columns = ['file', 'estimate']
    if exact:
        columns.extend(['exact', 'relative_error'])
    lines = ['\t'.join(columns)] + ['\t'.join(row) for row in rows]
    text = '\n'.join(lines) + '\n'
    if output is None:
        sys.stdout.write(text)
    else:
        with open(output, 'w') as f:
            f.write(text)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for hllcount."""
    args = parse_args(argv)

    for filepath in args.filepaths:
        if filepath != STDIN_PATH and not os.path.exists(filepath):
            print(f"Error: File {filepath} does not exist", file=sys.stderr)
            sys.exit(2)

    num_threads = max(1, args.threads)
    if STDIN_PATH in args.filepaths and num_threads > 1:
        if args.debug:
            print("Reading stdin, falling back to a single process", file=sys.stderr)
        num_threads = 1

    if args.debug:
        print(f"Sketching {len(args.filepaths)} files with precision={args.precision}, "
              f"seed={args.seed}, threads={num_threads}", file=sys.stderr)

    jobs = [(filepath, args.precision, args.seed, args.exact, args.debug)
            for filepath in args.filepaths]
    if num_threads > 1:
        with Pool(processes=min(num_threads, len(jobs))) as pool:
            results = pool.starmap(process_file, jobs)
    else:
        results = [process_file(*job) for job in jobs]

    rows = [format_row(filepath, sketch, counter)
            for filepath, (sketch, counter) in zip(args.filepaths, results)]

    if args.union:
        union_sketch = HyperLogLog(precision=args.precision, seed=args.seed)
        union_counter = ExactCounter() if args.exact else None
        for sketch, counter in results:
            union_sketch.merge(sketch)
            if union_counter is not None:
                union_counter.merge(counter)
        rows.append(format_row(UNION_LABEL, union_sketch, union_counter))

    write_results(rows, args.exact, args.output)


if __name__ == "__main__":
    main()
