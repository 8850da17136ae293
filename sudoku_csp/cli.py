"""Command-line interface for the sudoku search engine."""

import argparse
import os
import sys
from typing import List, Optional

from .core.board import Board
from .puzzles import load_puzzles
from .solvers import ALGORITHMS, create_solver, SearchTrace
from .benchmark import Benchmark
from .benchmark.visualizer import Visualizer


ALGORITHM_CHOICES = list(ALGORITHMS) + ["all"]


def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Sudoku solving by backtracking with constraint propagation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a puzzle with forward checking and the MCV heuristic
  sudoku-csp solve --algorithm fcmcvll --puzzle "0030206..."

  # Solve the third puzzle of a file with every algorithm
  sudoku-csp solve --file puzzles9.txt --size 9 --index 2 --algorithm all

  # Time one algorithm on the first 20 puzzles of a file
  sudoku-csp batch --file puzzles16.txt --size 16 --count 20 --algorithm fcmcvll

  # Keep the search steps of every puzzle
  sudoku-csp batch --file puzzles9.txt --algorithm cbt --trace-dir traces/

  # Compare all algorithms and write tables and charts
  sudoku-csp compare --file puzzles9.txt --size 9 --output results/
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve a single puzzle")
    source = solve_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--puzzle", "-p", type=str,
        help="Puzzle string (N*N chars, 0 or . for empty tiles, A-G above 9)"
    )
    source.add_argument(
        "--file", "-f", type=str,
        help="Puzzle file to read the puzzle from"
    )
    solve_parser.add_argument(
        "--size", type=int, choices=[9, 16], default=9,
        help="Puzzle size of --file (default: 9)"
    )
    solve_parser.add_argument(
        "--index", "-i", type=int, default=0,
        help="Index of the puzzle in --file (default: 0)"
    )
    solve_parser.add_argument(
        "--algorithm", "-a", choices=ALGORITHM_CHOICES, default="fcmcvll",
        help="Search strategy to use (default: fcmcvll)"
    )
    solve_parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Show detailed solving statistics"
    )
    solve_parser.add_argument(
        "--trace", type=str, default=None,
        help="Write every search step to this file"
    )

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Solve every puzzle of a file")
    _add_puzzle_file_args(batch_parser)
    batch_parser.add_argument(
        "--algorithm", "-a", choices=ALGORITHM_CHOICES, default="fcmcvll",
        help="Search strategy to use (default: fcmcvll)"
    )
    batch_parser.add_argument(
        "--trace-dir", type=str, default=None,
        help="Write the search steps of every puzzle to this directory"
    )
    _add_run_args(batch_parser)

    # Compare command
    compare_parser = subparsers.add_parser("compare", help="Compare the algorithms on a puzzle file")
    _add_puzzle_file_args(compare_parser)
    compare_parser.add_argument(
        "--exclude", "-x", nargs="*", choices=list(ALGORITHMS), default=[],
        help="Algorithms to leave out"
    )
    compare_parser.add_argument(
        "--output", "-o", type=str, default="results",
        help="Output directory for results (default: results)"
    )
    compare_parser.add_argument(
        "--no-charts", action="store_true",
        help="Skip chart generation"
    )
    _add_run_args(compare_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "solve":
            cmd_solve(args)
        elif args.command == "batch":
            cmd_batch(args)
        elif args.command == "compare":
            cmd_compare(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)


def _add_puzzle_file_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--file", "-f", type=str, required=True,
        help="Puzzle file"
    )
    parser.add_argument(
        "--size", type=int, choices=[9, 16], default=9,
        help="Puzzle size, selects the file layout (default: 9)"
    )
    parser.add_argument(
        "--count", "-n", type=int, default=None,
        help="Number of puzzles to read (default: all)"
    )


def _add_run_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workers", "-w", type=int, default=1,
        help="Number of puzzles solved in parallel (default: 1)"
    )
    parser.add_argument(
        "--timeout", "-t", type=float, default=60.0,
        help="Seconds allowed per puzzle and algorithm (default: 60)"
    )


def _selected(name: str) -> List[str]:
    return list(ALGORITHMS) if name == "all" else [name]


def _trace_path(path: str, name: str, several: bool) -> str:
    if not several:
        return path
    root, ext = os.path.splitext(path)
    return f"{root}_{name}{ext}"


def cmd_solve(args):
    """Handle the solve command."""
    if args.puzzle is not None:
        board = Board.from_string(args.puzzle)
    else:
        if args.index < 0:
            raise ValueError("--index must not be negative")
        puzzles = load_puzzles(args.file, args.size, count=args.index + 1)
        board = puzzles[args.index]

    print("Input puzzle:")
    print(board)
    print()

    names = _selected(args.algorithm)
    for name in names:
        trace = SearchTrace() if args.trace else None
        solver = create_solver(name, trace=trace)

        print(f"Solving with {solver.name}...")
        solution, stats = solver.solve(board)

        if stats.solved:
            print(f"✓ Solved in {stats.time_seconds * 1000:.3f} ms, {stats.nodes_explored:,} nodes expanded")
            if args.verbose:
                print(f"  Backtracks: {stats.backtracks:,}")
                print(f"  Steps: {stats.iterations:,}")
                print(f"  Memory: {stats.memory_bytes / 1024:.2f} KB")
            print(solution)
        else:
            print(f"✗ No solution ({stats.nodes_explored:,} nodes expanded)")
            if args.verbose:
                print(f"  Time: {stats.time_seconds * 1000:.3f} ms")
                print(f"  Backtracks: {stats.backtracks:,}")

        if trace is not None:
            path = _trace_path(args.trace, name, len(names) > 1)
            trace.write(path)
            print(f"  Trace of {len(trace):,} steps written to {path}")
        print()


def cmd_batch(args):
    """Handle the batch command."""
    puzzles = load_puzzles(args.file, args.size, count=args.count)
    names = _selected(args.algorithm)

    benchmark = Benchmark(
        puzzles,
        algorithms=names,
        timeout_seconds=args.timeout,
        workers=args.workers,
        puzzle_set=os.path.splitext(os.path.basename(args.file))[0],
        trace_dir=args.trace_dir
    )

    print(f"Loaded {len(puzzles)} puzzles of size {args.size} from {args.file}")
    results = benchmark.run()

    for name in names:
        label = benchmark.labels[name]
        print(f"\nEvaluating {label}...")
        for r in results:
            if r.algorithm != label:
                continue
            if "error" in r.extra:
                print(f"\tSudoku {r.puzzle_id}: {r.extra['error']}")
            else:
                status = "" if r.solved else " (no solution)"
                print(f"\tSudoku {r.puzzle_id}: {r.nodes_explored} nodes exp., "
                      f"{r.time_seconds * 1000:.3f}ms elapsed.{status}")

    summary = benchmark.get_summary()
    print("\n" + "=" * 60)
    print("TOTALS")
    print("=" * 60)
    for label, stats in summary["results_by_algorithm"].items():
        print(f"\n{label}:")
        print(f"  Solved: {stats['total_solved']}/{stats['total_tested']}")
        print(f"  Nodes expanded: {stats['total_nodes']:,} (avg {stats['avg_nodes']:,.1f})")
        print(f"  Avg Time: {stats['avg_time_seconds'] * 1000:.3f} ms")
        if stats["timeouts"]:
            print(f"  Timeouts: {stats['timeouts']}")

    if args.trace_dir:
        print(f"\nSearch traces written to {args.trace_dir}")


def cmd_compare(args):
    """Handle the compare command."""
    puzzles = load_puzzles(args.file, args.size, count=args.count)
    names = [name for name in ALGORITHMS if name not in args.exclude]
    if not names:
        raise ValueError("Every algorithm was excluded")

    print("=" * 60)
    print("SUDOKU SEARCH COMPARISON")
    print("=" * 60)
    print(f"Puzzles: {len(puzzles)} (size {args.size}) from {args.file}")

    benchmark = Benchmark(
        puzzles,
        algorithms=names,
        timeout_seconds=args.timeout,
        workers=args.workers,
        puzzle_set=os.path.splitext(os.path.basename(args.file))[0]
    )

    print(f"Algorithms: {', '.join(benchmark.labels[n] for n in names)}")
    print(f"Output directory: {args.output}")
    print("=" * 60)

    results = benchmark.run()

    _, plain = benchmark.tables()
    print()
    print(plain)

    benchmark.save_results(args.output)

    if not args.no_charts:
        print("\nGenerating charts...")
        visualizer = Visualizer(results, args.output)
        charts = visualizer.generate_all()
        visualizer.generate_summary_table()
        print(f"Charts saved to {args.output}/")
        for chart in charts:
            print(f"  - {os.path.basename(chart)}")

    print("\n" + "=" * 60)
    print("Comparison complete!")


if __name__ == "__main__":
    main()
