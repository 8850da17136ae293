"""Visualization utilities for benchmark results."""

from __future__ import annotations
import os
from typing import List

import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np

from .benchmark import BenchmarkResult


class Visualizer:
    """
    Visualization generator for benchmark results.

    Creates charts comparing the strategies on node expansions and solve time.
    Naive and incremental variants of a strategy share a hue; the incremental
    one is drawn darker.
    """

    COLORS = {
        "CBT": "#95d5b2",       # Light green
        "CBT-LL": "#2d6a4f",    # Dark green
        "FC": "#90caf9",        # Light blue
        "FC-LL": "#1565c0",     # Dark blue
        "FC-MCV": "#f4a261",    # Light orange
        "FC-MCV-LL": "#c0392b"  # Dark red
    }

    def __init__(self, results: List[BenchmarkResult], output_dir: str = "results"):
        """
        Initialize the visualizer.

        Args:
            results: List of benchmark results.
            output_dir: Directory to save generated charts.
        """
        self.results = results
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        plt.style.use('seaborn-v0_8-whitegrid')
        sns.set_palette("husl")

    @property
    def algorithms(self) -> List[str]:
        """Algorithm labels in order of first appearance."""
        seen: List[str] = []
        for r in self.results:
            if r.algorithm not in seen:
                seen.append(r.algorithm)
        return seen

    def _finished(self, algo: str) -> List[BenchmarkResult]:
        return [r for r in self.results if r.algorithm == algo and "error" not in r.extra]

    def _save(self, name: str) -> str:
        plt.tight_layout()
        path = os.path.join(self.output_dir, name)
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()
        return path

    def generate_all(self) -> List[str]:
        """
        Generate all charts.

        Returns:
            List of paths to generated chart files.
        """
        return [
            self.plot_nodes_comparison(),
            self.plot_time_comparison(),
            self.plot_nodes_per_puzzle(),
            self.plot_time_distribution(),
        ]

    def plot_nodes_comparison(self) -> str:
        """Create bar chart comparing average node expansions."""
        fig, ax = plt.subplots(figsize=(10, 6))

        algorithms = self.algorithms
        avg_nodes = []
        for algo in algorithms:
            nodes = [r.nodes_explored for r in self._finished(algo)]
            avg_nodes.append(np.mean(nodes) if nodes else 0)

        bars = ax.bar(algorithms, avg_nodes,
                      color=[self.COLORS.get(a, "#95a5a6") for a in algorithms],
                      edgecolor='black', linewidth=0.5)

        for bar, value in zip(bars, avg_nodes):
            ax.annotate(f'{value:,.0f}',
                        xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                        xytext=(0, 3),
                        textcoords="offset points",
                        ha='center', va='bottom', fontsize=10)

        ax.set_xlabel('Algorithm', fontsize=12)
        ax.set_ylabel('Average Node Expansions (Log Scale)', fontsize=12)
        ax.set_title('Average Node Expansions by Algorithm', fontsize=14, fontweight='bold')
        if any(v > 0 for v in avg_nodes):
            ax.set_yscale('log')

        return self._save("nodes_comparison.png")

    def plot_time_comparison(self) -> str:
        """Create bar chart comparing average solve times."""
        fig, ax = plt.subplots(figsize=(10, 6))

        algorithms = self.algorithms
        avg_times = []
        for algo in algorithms:
            times = [r.time_seconds * 1000 for r in self.results if r.algorithm == algo]
            avg_times.append(np.mean(times))

        bars = ax.bar(algorithms, avg_times,
                      color=[self.COLORS.get(a, "#95a5a6") for a in algorithms],
                      edgecolor='black', linewidth=0.5)

        for bar, time in zip(bars, avg_times):
            ax.annotate(f'{time:.1f} ms',
                        xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                        xytext=(0, 3),
                        textcoords="offset points",
                        ha='center', va='bottom', fontsize=10)

        ax.set_xlabel('Algorithm', fontsize=12)
        ax.set_ylabel('Average Time (ms)', fontsize=12)
        ax.set_title('Average Solve Time by Algorithm', fontsize=14, fontweight='bold')
        ax.set_ylim(bottom=0)

        return self._save("time_comparison.png")

    def plot_nodes_per_puzzle(self) -> str:
        """Create line chart of node expansions for every puzzle."""
        fig, ax = plt.subplots(figsize=(12, 6))

        for algo in self.algorithms:
            finished = sorted(self._finished(algo), key=lambda r: r.puzzle_id)
            if not finished:
                continue
            ax.plot([r.puzzle_id for r in finished],
                    [max(r.nodes_explored, 1) for r in finished],
                    marker='o', markersize=3, linewidth=1,
                    label=algo, color=self.COLORS.get(algo, "#95a5a6"))

        ax.set_xlabel('Puzzle', fontsize=12)
        ax.set_ylabel('Node Expansions (Log Scale)', fontsize=12)
        ax.set_title('Node Expansions per Puzzle', fontsize=14, fontweight='bold')
        ax.set_yscale('log')
        ax.legend(title='Algorithm', bbox_to_anchor=(1.05, 1), loc='upper left')

        return self._save("nodes_per_puzzle.png")

    def plot_time_distribution(self) -> str:
        """Create box plot showing time distribution."""
        fig, ax = plt.subplots(figsize=(12, 6))

        algorithms = self.algorithms
        data = [
            [r.time_seconds * 1000 for r in self.results if r.algorithm == algo]
            for algo in algorithms
        ]

        bp = ax.boxplot(data, patch_artist=True)
        ax.set_xticks(range(1, len(algorithms) + 1))
        ax.set_xticklabels(algorithms)

        for patch, algo in zip(bp['boxes'], algorithms):
            patch.set_facecolor(self.COLORS.get(algo, "#95a5a6"))
            patch.set_alpha(0.7)

        ax.set_xlabel('Algorithm', fontsize=12)
        ax.set_ylabel('Time (ms)', fontsize=12)
        ax.set_title('Solve Time Distribution by Algorithm', fontsize=14, fontweight='bold')

        return self._save("time_distribution.png")

    def generate_summary_table(self) -> str:
        """Generate a markdown summary table."""
        lines = [
            "# Benchmark Summary\n",
            "| Algorithm | Solved | Avg Nodes | Avg Backtracks | Avg Time |",
            "|-----------|--------|-----------|----------------|----------|"
        ]

        for algo in self.algorithms:
            algo_results = [r for r in self.results if r.algorithm == algo]
            finished = self._finished(algo)

            solved = sum(1 for r in algo_results if r.solved)
            avg_nodes = np.mean([r.nodes_explored for r in finished]) if finished else 0
            avg_backtracks = np.mean([r.backtracks for r in finished]) if finished else 0
            avg_time = np.mean([r.time_seconds * 1000 for r in algo_results])

            lines.append(
                f"| {algo} | {solved}/{len(algo_results)} | {int(avg_nodes):,} | "
                f"{int(avg_backtracks):,} | {avg_time:.2f} ms |"
            )

        content = "\n".join(lines) + "\n"

        path = os.path.join(self.output_dir, "benchmark_summary.md")
        with open(path, "w") as f:
            f.write(content)

        return path
