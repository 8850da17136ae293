"""Benchmarking framework for comparing the search strategies."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple
from concurrent.futures import ThreadPoolExecutor, TimeoutError, as_completed
import json
import os

from tqdm import tqdm

from ..core.board import Board
from ..puzzles import save_puzzles
from ..solvers import ALGORITHMS, SearchTrace, create_solver
from .report import comparison_tables


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    puzzle_id: int
    puzzle_set: str
    algorithm: str
    solved: bool
    time_seconds: float
    memory_bytes: int
    iterations: int
    backtracks: int
    nodes_explored: int
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "puzzle_id": self.puzzle_id,
            "puzzle_set": self.puzzle_set,
            "algorithm": self.algorithm,
            "solved": self.solved,
            "time_seconds": self.time_seconds,
            "time_ms": self.time_seconds * 1000,
            "memory_bytes": self.memory_bytes,
            "memory_mb": self.memory_bytes / (1024 * 1024),
            "iterations": self.iterations,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            **self.extra
        }


class Benchmark:
    """
    Runs every selected strategy on every puzzle and collects node
    expansions, timings and memory use.

    Each run gets its own solver and its own copy of the puzzle, so runs can
    be spread over a thread pool. A run that exceeds ``timeout_seconds`` is
    recorded as a timeout; the search itself cannot be interrupted and keeps
    its worker thread until it finishes. Because that search still allocates
    under the process-wide tracemalloc, memory is no longer measured for any
    run started after the first timeout; those results carry
    ``memory_tracked = False`` in ``extra``.
    """

    def __init__(
        self,
        puzzles: List[Board],
        algorithms: Optional[List[str]] = None,
        timeout_seconds: float = 60.0,
        workers: int = 1,
        puzzle_set: str = "puzzles",
        trace_dir: Optional[str] = None
    ):
        """
        Initialize the benchmark.

        Args:
            puzzles: Puzzles to solve.
            algorithms: Short algorithm names (default: all six).
            timeout_seconds: Maximum time per puzzle per algorithm.
            workers: Number of runs in flight at once.
            puzzle_set: Name stored with every result.
            trace_dir: If given, the search trace of every finished run is
                       written there as ``<algorithm>_<puzzle_id>.txt``.
        """
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if workers < 1:
            raise ValueError("workers must be at least 1")

        self.puzzles = list(puzzles)
        self.algorithms = [a.lower() for a in (algorithms or list(ALGORITHMS))]
        for name in self.algorithms:
            if name not in ALGORITHMS:
                raise ValueError(f"Unknown algorithm {name!r}, expected one of {', '.join(ALGORITHMS)}")

        self.timeout_seconds = timeout_seconds
        self.workers = workers
        self.puzzle_set = puzzle_set
        self.trace_dir = trace_dir
        self.timed_out = False
        self.labels = {name: create_solver(name).name for name in self.algorithms}
        self.results: List[BenchmarkResult] = []

    def run(self, show_progress: bool = True) -> List[BenchmarkResult]:
        """
        Run the full benchmark suite.

        Returns:
            List of BenchmarkResult objects, grouped by algorithm in the
            order they were requested and by puzzle within each algorithm.
        """
        tasks = [
            (name, puzzle_id)
            for name in self.algorithms
            for puzzle_id in range(len(self.puzzles))
        ]

        pbar = tqdm(total=len(tasks), desc="Benchmarking", disable=not show_progress)
        done: Dict[Tuple[str, int], BenchmarkResult] = {}

        if self.workers == 1:
            for name, puzzle_id in tasks:
                done[(name, puzzle_id)] = self._run_single(name, puzzle_id)
                pbar.update(1)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                futures = {
                    pool.submit(self._run_single, name, puzzle_id): (name, puzzle_id)
                    for name, puzzle_id in tasks
                }
                for future in as_completed(futures):
                    done[futures[future]] = future.result()
                    pbar.update(1)

        pbar.close()
        self.results = [done[task] for task in tasks]
        return self.results

    def _run_single(self, name: str, puzzle_id: int) -> BenchmarkResult:
        """Run one algorithm on one puzzle under the deadline."""
        # tracemalloc is process wide and cannot be shared between threads,
        # including a timed-out search still running in the background.
        track_memory = self.workers == 1 and not self.timed_out
        trace = SearchTrace() if self.trace_dir else None
        solver = create_solver(name, track_memory=track_memory, trace=trace)
        puzzle = self.puzzles[puzzle_id]
        label = self.labels[name]

        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(solver.solve, puzzle)
        try:
            _, stats = future.result(timeout=self.timeout_seconds)
            if trace is not None:
                os.makedirs(self.trace_dir, exist_ok=True)
                trace.write(os.path.join(self.trace_dir, f"{name}_{puzzle_id}.txt"))
            return BenchmarkResult(
                puzzle_id=puzzle_id,
                puzzle_set=self.puzzle_set,
                algorithm=label,
                solved=stats.solved,
                time_seconds=stats.time_seconds,
                memory_bytes=stats.memory_bytes,
                iterations=stats.iterations,
                backtracks=stats.backtracks,
                nodes_explored=stats.nodes_explored,
                extra={**stats.extra, "memory_tracked": track_memory}
            )
        except TimeoutError:
            self.timed_out = True
            return self._failed(puzzle_id, label, "Timeout")
        except Exception as e:
            return self._failed(puzzle_id, label, f"{type(e).__name__}: {e}")
        finally:
            executor.shutdown(wait=False)

    def _failed(self, puzzle_id: int, label: str, error: str) -> BenchmarkResult:
        return BenchmarkResult(
            puzzle_id=puzzle_id,
            puzzle_set=self.puzzle_set,
            algorithm=label,
            solved=False,
            time_seconds=self.timeout_seconds,
            memory_bytes=0,
            iterations=0,
            backtracks=0,
            nodes_explored=0,
            extra={"error": error}
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from benchmark results."""
        summary = {
            "puzzle_set": self.puzzle_set,
            "total_puzzles": len(self.puzzles),
            "algorithms_tested": [self.labels[name] for name in self.algorithms],
            "timeout_seconds": self.timeout_seconds,
            "results_by_algorithm": {}
        }

        for name in self.algorithms:
            label = self.labels[name]
            alg_results = [r for r in self.results if r.algorithm == label]
            if not alg_results:
                continue

            solved = [r for r in alg_results if r.solved]
            finished = [r for r in alg_results if "error" not in r.extra]
            times = [r.time_seconds for r in alg_results]
            nodes = [r.nodes_explored for r in finished]

            summary["results_by_algorithm"][label] = {
                "accuracy": len(solved) / len(alg_results) * 100,
                "total_solved": len(solved),
                "total_tested": len(alg_results),
                "timeouts": sum(1 for r in alg_results if r.extra.get("error") == "Timeout"),
                "total_nodes": sum(nodes),
                "avg_nodes": sum(nodes) / len(nodes) if nodes else 0.0,
                "avg_backtracks": (sum(r.backtracks for r in finished) / len(finished)
                                   if finished else 0.0),
                "avg_time_seconds": sum(times) / len(times),
                "max_time_seconds": max(times),
                "min_time_seconds": min(times),
            }

        return summary

    def tables(self) -> Tuple[str, str]:
        """LaTeX and plain comparison tables of the current results."""
        return comparison_tables(
            self.results, [self.labels[name] for name in self.algorithms]
        )

    def save_results(self, output_dir: str) -> None:
        """Save benchmark results, comparison tables and the puzzles to files."""
        os.makedirs(output_dir, exist_ok=True)

        results_file = os.path.join(output_dir, "benchmark_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        summary_file = os.path.join(output_dir, "benchmark_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        latex, plain = self.tables()
        with open(os.path.join(output_dir, "latex.txt"), "w") as f:
            f.write(latex + "\n")
        with open(os.path.join(output_dir, "plain.txt"), "w") as f:
            f.write(plain)

        save_puzzles(self.puzzles, os.path.join(output_dir, f"{self.puzzle_set}.txt"))

        print(f"Results and puzzles saved to {output_dir}")
