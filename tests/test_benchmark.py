"""Tests for the benchmark driver, comparison tables and charts."""

import json
import os

import pytest
from sudoku_csp.core.board import Board
from sudoku_csp.benchmark import Benchmark, BenchmarkResult, LatexTabular, comparison_tables, Visualizer


TEST_PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

TEST_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


def puzzles():
    return [
        Board.from_string(TEST_PUZZLE),
        Board.from_string("0" + TEST_SOLUTION[1:]),
    ]


def result(puzzle_id, algorithm, nodes, seconds, **extra):
    return BenchmarkResult(
        puzzle_id=puzzle_id, puzzle_set="set", algorithm=algorithm, solved=not extra,
        time_seconds=seconds, memory_bytes=0, iterations=nodes * 2, backtracks=0,
        nodes_explored=nodes, extra=extra
    )


class TestBenchmark:
    """Tests for the Benchmark driver."""

    def test_run_all_algorithms(self):
        """Test that every algorithm runs on every puzzle."""
        benchmark = Benchmark(puzzles())
        results = benchmark.run(show_progress=False)

        assert len(results) == 12
        assert all(r.solved for r in results)
        assert [r.algorithm for r in results[:2]] == ["CBT", "CBT"]
        assert [r.puzzle_id for r in results[:2]] == [0, 1]
        assert results[1].nodes_explored == 1

    def test_parallel_matches_sequential(self):
        """Test that a thread pool yields the same expansions in the same order."""
        sequential = Benchmark(puzzles(), algorithms=["cbt", "fcmcvll"]).run(show_progress=False)
        parallel = Benchmark(puzzles(), algorithms=["cbt", "fcmcvll"], workers=4).run(show_progress=False)

        assert [(r.algorithm, r.puzzle_id, r.nodes_explored) for r in sequential] == \
               [(r.algorithm, r.puzzle_id, r.nodes_explored) for r in parallel]
        assert all(r.memory_bytes == 0 for r in parallel)

    def test_summary(self):
        benchmark = Benchmark(puzzles(), algorithms=["fc", "fcll"])
        benchmark.run(show_progress=False)
        summary = benchmark.get_summary()

        assert summary["total_puzzles"] == 2
        assert summary["algorithms_tested"] == ["FC", "FC-LL"]
        fc = summary["results_by_algorithm"]["FC"]
        assert fc["total_solved"] == 2
        assert fc["accuracy"] == 100.0
        assert fc["timeouts"] == 0
        assert fc["total_nodes"] == sum(r.nodes_explored for r in benchmark.results if r.algorithm == "FC")

    def test_invalid_configuration(self):
        with pytest.raises(ValueError):
            Benchmark(puzzles(), algorithms=["dfs"])
        with pytest.raises(ValueError):
            Benchmark(puzzles(), workers=0)
        with pytest.raises(ValueError):
            Benchmark(puzzles(), timeout_seconds=0)

    def test_save_results(self, tmp_path):
        """Test that results, summary, tables and puzzles are written."""
        benchmark = Benchmark(puzzles(), algorithms=["cbt"], puzzle_set="sample")
        benchmark.run(show_progress=False)
        benchmark.save_results(str(tmp_path))

        for name in ["benchmark_results.json", "benchmark_summary.json",
                     "latex.txt", "plain.txt", "sample.txt"]:
            assert os.path.exists(tmp_path / name)

        with open(tmp_path / "benchmark_results.json") as f:
            data = json.load(f)
        assert len(data) == 2
        assert data[0]["algorithm"] == "CBT"
        assert data[0]["variables"] == 51

    def test_memory_tracked_sequentially(self):
        benchmark = Benchmark(puzzles()[:1], algorithms=["cbt"])
        r = benchmark.run(show_progress=False)[0]
        assert r.extra["memory_tracked"] is True
        assert r.memory_bytes > 0

    def test_no_memory_tracking_after_timeout(self):
        """Test that runs after a timeout leave tracemalloc alone."""
        benchmark = Benchmark(puzzles(), algorithms=["cbt"], timeout_seconds=1e-6)
        first = benchmark.run(show_progress=False)[0]
        assert first.extra == {"error": "Timeout"}
        assert benchmark.timed_out

        benchmark.timeout_seconds = 60.0
        results = benchmark.run(show_progress=False)
        assert all(r.solved for r in results)
        assert all(r.memory_bytes == 0 for r in results)
        assert all(r.extra["memory_tracked"] is False for r in results)

    def test_trace_dir(self, tmp_path):
        """Test that one trace file is written per puzzle and algorithm."""
        trace_dir = tmp_path / "traces"
        benchmark = Benchmark(puzzles(), algorithms=["cbt", "fcmcvll"], trace_dir=str(trace_dir))
        benchmark.run(show_progress=False)

        assert sorted(os.listdir(trace_dir)) == [
            "cbt_0.txt", "cbt_1.txt", "fcmcvll_0.txt", "fcmcvll_1.txt"
        ]
        lines = (trace_dir / "cbt_1.txt").read_text().splitlines()
        assert lines[0].startswith("[1] Checking tile")
        assert lines[-1].endswith("Solution found!")

    def test_result_to_dict(self):
        r = result(3, "FC", 10, 0.002)
        d = r.to_dict()
        assert d["puzzle_id"] == 3
        assert d["time_ms"] == pytest.approx(2.0)
        assert d["memory_mb"] == 0


class TestLatexTabular:
    """Tests for the LaTeX table builder."""

    def test_simple_table(self):
        table = LatexTabular(3)
        table.add_row(["a", "b", "c"], header=True)
        table.add_row(["1", "2", "3"])
        text = table.render()

        assert text.startswith("\\begin{tabular}{*{3}{|c}|} \\hline ")
        assert "a & b & c\\\\ \\hline \\hline " in text
        assert "1 & 2 & 3\\\\ \\hline " in text
        assert text.endswith("\\end{tabular}")
        assert table.num_rows == 2

    def test_short_row_spans_columns(self):
        """Test that fewer entries than columns are spread with multicolumn."""
        table = LatexTabular(5)
        table.add_row(["x", "y"])
        assert "\\multicolumn{2}{|c}{x} & \\multicolumn{3}{|c|}{y}" in str(table)

    def test_multicolumn_row(self):
        table = LatexTabular(5)
        table.add_multicolumn_row(["", "CBT", "FC"], [1, 2, 2])
        assert ("\\multicolumn{1}{|c}{} & \\multicolumn{2}{|c}{CBT} & "
                "\\multicolumn{2}{|c|}{FC}") in str(table)

    def test_errors(self):
        table = LatexTabular(2)
        with pytest.raises(ValueError):
            table.add_row(["1", "2", "3"])
        with pytest.raises(ValueError):
            table.add_multicolumn_row(["a", "b"], [2, 1])
        with pytest.raises(ValueError):
            table.add_multicolumn_row(["a"], [1, 1])

        table.close()
        table.close()
        assert str(table).count("\\end{tabular}") == 1
        with pytest.raises(ValueError):
            table.add_row(["1", "2"])


class TestComparisonTables:
    """Tests for the per-puzzle comparison."""

    def test_tables(self):
        results = [
            result(0, "CBT", 100, 0.010),
            result(0, "FC", 40, 0.005),
            result(1, "CBT", 7, 0.001),
            result(1, "FC", 0, 60.0, error="Timeout"),
        ]
        latex, plain = comparison_tables(results)

        lines = plain.splitlines()
        assert lines[0] == "\tCBT\t\tFC"
        assert lines[1] == "Sudoku\tNodes exp.\tTime(ms)\tNodes exp.\tTime(ms)"
        assert lines[2] == "0\t100\t10.000\t40\t5.000"
        assert lines[3] == "1\t7\t1.000\t-\tTimeout"

        assert "\\begin{tabular}{*{5}{|c}|}" in latex
        assert "s\\# & n & t (ms) & n & t (ms)" in latex
        assert "0 & 100 & 10.000 & 40 & 5.000" in latex

    def test_explicit_order_and_missing_cells(self):
        results = [result(0, "CBT", 5, 0.001)]
        _, plain = comparison_tables(results, ["FC", "CBT"])
        assert plain.splitlines()[2] == "0\t-\t-\t5\t1.000"


class TestVisualizer:
    """Tests for chart generation."""

    def test_generate_all(self, tmp_path):
        results = [
            result(0, "CBT", 100, 0.010),
            result(1, "CBT", 30, 0.004),
            result(0, "FC-MCV-LL", 51, 0.003),
            result(1, "FC-MCV-LL", 0, 60.0, error="Timeout"),
        ]
        visualizer = Visualizer(results, str(tmp_path))
        charts = visualizer.generate_all()

        assert len(charts) == 4
        for chart in charts:
            assert os.path.exists(chart)

        summary = visualizer.generate_summary_table()
        with open(summary) as f:
            text = f.read()
        assert "| CBT | 2/2 | 65 |" in text
        assert "| FC-MCV-LL | 1/2 | 51 |" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
