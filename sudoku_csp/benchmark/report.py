"""Comparison tables in LaTeX and tab-separated plain text."""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .benchmark import BenchmarkResult


class LatexTabular:
    """
    Incremental builder for a LaTeX ``tabular`` with a vertical rule between
    all columns and a horizontal rule below every row.

    Rows with fewer entries than columns are spread out with
    ``\\multicolumn``; once closed no more rows can be added.
    """

    def __init__(self, num_columns: int):
        if num_columns < 1:
            raise ValueError("A tabular needs at least one column")
        self.num_columns = num_columns
        self.num_rows = 0
        self.closed = False
        self._parts = [f"\\begin{{tabular}}{{*{{{num_columns}}}{{|c}}|}} \\hline "]

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("Table is closed")

    def _end_row(self, header: bool) -> None:
        self._parts.append("\\\\ \\hline ")
        if header:
            self._parts.append("\\hline ")
        self.num_rows += 1

    def add_row(self, entries: Sequence[str], header: bool = False) -> None:
        """
        Add a row. With fewer entries than columns each entry spans an equal
        share of the columns and the last one takes what is left over.

        Args:
            entries: Cell contents.
            header: Put a double rule below the row.
        """
        self._check_open()
        count = len(entries)
        if count == 0 or count > self.num_columns:
            raise ValueError(f"Expected 1 to {self.num_columns} entries, got {count}")

        span = self.num_columns // count
        for entry in entries[:-1]:
            if span == 1:
                self._parts.append(f"{entry} & ")
            else:
                self._parts.append(f"\\multicolumn{{{span}}}{{|c}}{{{entry}}} & ")

        rest = self.num_columns - span * (count - 1)
        if rest == 1:
            self._parts.append(f"{entries[-1]}")
        else:
            self._parts.append(f"\\multicolumn{{{rest}}}{{|c|}}{{{entries[-1]}}}")
        self._end_row(header)

    def add_multicolumn_row(self, entries: Sequence[str], columns: Sequence[int],
                            header: bool = False) -> None:
        """Add a row where ``entries[i]`` spans ``columns[i]`` columns."""
        self._check_open()
        if len(entries) != len(columns) or not entries:
            raise ValueError("Need exactly one column count per entry")
        if sum(columns) > self.num_columns:
            raise ValueError(f"Row spans {sum(columns)} columns, table has {self.num_columns}")

        for entry, span in zip(entries[:-1], columns[:-1]):
            self._parts.append(f"\\multicolumn{{{span}}}{{|c}}{{{entry}}} & ")
        self._parts.append(f"\\multicolumn{{{columns[-1]}}}{{|c|}}{{{entries[-1]}}}")
        self._end_row(header)

    def close(self) -> None:
        if not self.closed:
            self._parts.append("\\end{tabular}")
        self.closed = True

    def render(self) -> str:
        """Close the table and return it."""
        self.close()
        return str(self)

    def __str__(self) -> str:
        return "".join(self._parts)


def _format_cell(result: Optional[BenchmarkResult]) -> Tuple[str, str]:
    if result is None:
        return "-", "-"
    if "error" in result.extra:
        return "-", str(result.extra["error"])
    return str(result.nodes_explored), f"{result.time_seconds * 1000:.3f}"


def comparison_tables(results: List[BenchmarkResult],
                      algorithms: Optional[List[str]] = None) -> Tuple[str, str]:
    """
    Build the per-puzzle comparison of node expansions and solve time.

    Every puzzle gets one row holding, per algorithm, the number of node
    expansions ``n`` and the time in milliseconds.

    Args:
        results: Benchmark results.
        algorithms: Column order. Defaults to order of first appearance.

    Returns:
        Tuple of (LaTeX tabular, tab-separated plain text).
    """
    if algorithms is None:
        algorithms = []
        for r in results:
            if r.algorithm not in algorithms:
                algorithms.append(r.algorithm)

    by_key: Dict[Tuple[int, str], BenchmarkResult] = {
        (r.puzzle_id, r.algorithm): r for r in results
    }
    puzzle_ids = sorted({r.puzzle_id for r in results})

    latex = LatexTabular(len(algorithms) * 2 + 1)
    latex.add_multicolumn_row([""] + algorithms, [1] + [2] * len(algorithms))
    latex.add_row(["s\\#"] + ["n", "t (ms)"] * len(algorithms), header=True)

    plain = [
        "\t" + "\t\t".join(algorithms),
        "Sudoku\t" + "\t".join(["Nodes exp.\tTime(ms)"] * len(algorithms)),
    ]

    for pid in puzzle_ids:
        cells = []
        for alg in algorithms:
            cells.extend(_format_cell(by_key.get((pid, alg))))
        latex.add_row([str(pid)] + cells)
        plain.append("\t".join([str(pid)] + cells))

    return latex.render(), "\n".join(plain) + "\n"
