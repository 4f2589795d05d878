"""Test run with coverage, and parsing of the coverage text report.

Parsing targets the Istanbul/Jest ``text`` reporter table::

    File      | % Stmts | % Branch | % Funcs | % Lines |
    All files |   85.71 |      100 |      75 |   85.71 |
     src      |   85.71 |      100 |      75 |   85.71 |
      app.js  |   85.71 |      100 |      75 |   85.71 |

The aggregate is the first number after the aggregate label. Per-file rows
are rebuilt into full paths from the table's indentation and kept when they
fall under the configured source prefix. Any other layout that still has a
``All files ... NN.NN`` line yields an aggregate with no per-file data.
"""

from __future__ import annotations

import math
import re

from commitgate.config import GateConfig
from commitgate.exec import ToolRunner
from commitgate.lint import tail_output
from commitgate.types import CheckResult, CoverageReport

NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def _percent(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    if not 0 <= value <= 100:
        return None
    return value


def parse_aggregate(output: str, label: str = "All files") -> float | None:
    """First percentage following ``label``, or None when absent or malformed."""
    pattern = re.compile(re.escape(label) + r"[^\d\n]*?(" + NUMBER_RE.pattern + r")")
    match = pattern.search(output)
    if match is None:
        return None
    return _percent(match.group(1))


def _table_rows(output: str, label: str) -> list[tuple[int, str, list[str]]]:
    """(indent, name, cells) for each data row, skipping header, aggregate and rules."""
    rows: list[tuple[int, str, list[str]]] = []
    for raw in output.splitlines():
        if "|" not in raw:
            continue
        cells = raw.split("|")
        cell = cells[0].rstrip()
        name = cell.strip()
        if not name or name == "File" or name == label or set(name) <= {"-"}:
            continue
        rows.append((len(cell) - len(cell.lstrip()), name, cells))
    return rows


def parse_per_file(output: str, source_prefix: str = "src/", label: str = "All files") -> dict[str, float]:
    """Map of source path to statement coverage for rows under ``source_prefix``.

    A row is a directory when the row after it is indented deeper; names
    are never used to tell files from directories.
    """
    per_file: dict[str, float] = {}
    stack: list[tuple[int, str]] = []
    rows = _table_rows(output, label)

    for index, (indent, name, cells) in enumerate(rows):
        while stack and stack[-1][0] >= indent:
            stack.pop()

        next_indent = rows[index + 1][0] if index + 1 < len(rows) else -1
        if next_indent > indent:
            stack.append((indent, name.rstrip("/")))
            continue

        value = _percent(cells[1].strip())
        if value is None:
            continue
        full = "/".join([entry[1] for entry in stack] + [name])
        if full.startswith(source_prefix):
            per_file[full] = value

    return per_file


def parse_coverage_output(output: str, config: GateConfig | None = None) -> CoverageReport:
    config = config or GateConfig()
    return CoverageReport(
        overall_percent=parse_aggregate(output, config.coverage_aggregate_label),
        per_file=parse_per_file(output, config.coverage_source_prefix, config.coverage_aggregate_label),
    )


def _fmt(value: float) -> str:
    return f"{value:g}"


def evaluate_coverage(report: CoverageReport, config: GateConfig) -> list[CheckResult]:
    """Turn a parsed report into the overall hard gate and the per-file advisory.

    The overall threshold compares the integer part only: 59.99 blocks at 60.
    An unparsed aggregate is indeterminate, never treated as 0%.
    """
    results: list[CheckResult] = []
    minimum = config.min_overall_coverage

    overall = report.overall_percent
    if overall is None:
        results.append(
            CheckResult(
                name="coverage",
                status="warn",
                detail="Could not determine overall coverage from test output",
                hard=True,
            )
        )
    elif math.floor(overall) < minimum:
        results.append(
            CheckResult(
                name="coverage",
                status="fail",
                detail=f"Coverage {_fmt(overall)}% is below the {minimum}% minimum",
                hard=True,
            )
        )
    else:
        results.append(
            CheckResult(
                name="coverage",
                status="pass",
                detail=f"Coverage {_fmt(overall)}% meets the {minimum}% minimum",
                hard=True,
            )
        )

    low = sorted(
        (path, value)
        for path, value in report.per_file.items()
        if 0 < value < config.min_file_coverage
    )
    if low:
        listing = "\n".join(f"  {path}: {_fmt(value)}%" for path, value in low)
        results.append(
            CheckResult(
                name="file-coverage",
                status="warn",
                detail=f"Files below {config.min_file_coverage}% coverage:\n{listing}",
            )
        )
    return results


def run_coverage(runner: ToolRunner, config: GateConfig) -> list[CheckResult]:
    """Run tests with coverage. Failing tests block regardless of coverage."""
    result = runner.run()
    if result.returncode != 0:
        detail = f"Tests failed ({runner.describe()} exited {result.returncode})"
        output = tail_output(result.output)
        if output:
            detail = f"{detail}\n{output}"
        return [CheckResult(name="tests", status="fail", detail=detail, hard=True)]

    results = [CheckResult(name="tests", status="pass", detail="Tests passed", hard=True)]
    results.extend(evaluate_coverage(parse_coverage_output(result.output, config), config))
    return results
