"""Benchmark module for comparing the search strategies."""

from .benchmark import Benchmark, BenchmarkResult
from .report import LatexTabular, comparison_tables
from .visualizer import Visualizer

__all__ = ["Benchmark", "BenchmarkResult", "LatexTabular", "comparison_tables", "Visualizer"]
