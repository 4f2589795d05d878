"""Tests for coverage parsing and threshold decisions."""

from __future__ import annotations

import pytest

from commitgate.config import GateConfig
from commitgate.coverage import (
    evaluate_coverage,
    parse_aggregate,
    parse_coverage_output,
    parse_per_file,
    run_coverage,
)
from commitgate.types import CoverageReport
from gate_test_utils import FakeTool, coverage_table

CONFIG = GateConfig()


def _coverage_status(overall: float | None) -> str:
    results = evaluate_coverage(CoverageReport(overall_percent=overall), CONFIG)
    return next(r.status for r in results if r.name == "coverage")


def test_parse_aggregate_from_table() -> None:
    assert parse_aggregate(coverage_table("85.71")) == 85.71


def test_parse_aggregate_free_form_line() -> None:
    assert parse_aggregate("Coverage summary\nAll files ... 72.5\n") == 72.5


@pytest.mark.parametrize(
    "output",
    [
        "",
        "Tests: 12 passed\n",
        "All files |  N/A |\n12 more\n",
        "All files | 142 |\n",
    ],
)
def test_parse_aggregate_absent_or_malformed(output: str) -> None:
    assert parse_aggregate(output) is None


def test_parse_per_file_rebuilds_paths() -> None:
    output = coverage_table("75", {"app.js": "100", "legacy.js": "12", "empty.js": "0"})
    assert parse_per_file(output) == {"src/app.js": 100.0, "src/legacy.js": 12.0, "src/empty.js": 0.0}


def test_parse_per_file_nested_directories_and_prefix() -> None:
    output = "\n".join(
        [
            "File        | % Stmts | % Branch |",
            "All files   |      70 |       50 |",
            " lib        |      90 |       90 |",
            "  util.js   |      90 |       90 |",
            " src        |      60 |       40 |",
            "  index.js  |      15 |       10 |",
            " src/views  |      50 |       50 |",
            "  home.jsx  |       5 |        0 |",
        ]
    )
    assert parse_per_file(output) == {"src/index.js": 15.0, "src/views/home.jsx": 5.0}


def test_parse_per_file_flat_paths() -> None:
    output = "All files | 70 |\nsrc/a.js | 10 |\ntest/b.js | 5 |\n"
    assert parse_per_file(output) == {"src/a.js": 10.0}


@pytest.mark.parametrize(
    ("overall", "status"),
    [
        (60.0, "pass"),
        (59.99, "fail"),
        (60.5, "pass"),
        (0.0, "fail"),
        (100.0, "pass"),
        (None, "warn"),
    ],
)
def test_overall_threshold_uses_integer_part(overall: float | None, status: str) -> None:
    assert _coverage_status(overall) == status


def test_below_threshold_message_names_values() -> None:
    results = evaluate_coverage(parse_coverage_output(coverage_table("42.50")), CONFIG)
    coverage = next(r for r in results if r.name == "coverage")
    assert coverage.blocking
    assert coverage.detail == "Coverage 42.5% is below the 60% minimum"


def test_indeterminate_coverage_does_not_block() -> None:
    results = evaluate_coverage(CoverageReport(overall_percent=None), CONFIG)
    assert results[0].status == "warn"
    assert not results[0].blocking
    assert "Could not determine" in results[0].detail


def test_low_file_coverage_is_advisory() -> None:
    report = CoverageReport(
        overall_percent=90.0,
        per_file={"src/a.js": 19.9, "src/b.js": 0.0, "src/c.js": 20.0, "src/d.js": 3.0},
    )
    results = evaluate_coverage(report, CONFIG)
    low = next(r for r in results if r.name == "file-coverage")
    assert low.status == "warn"
    assert not low.hard
    assert "src/a.js: 19.9%" in low.detail
    assert "src/d.js: 3%" in low.detail
    assert "src/b.js" not in low.detail
    assert "src/c.js" not in low.detail


def test_custom_thresholds() -> None:
    config = GateConfig(min_overall_coverage=80, min_file_coverage=50)
    results = evaluate_coverage(CoverageReport(overall_percent=79.9, per_file={"src/a.js": 40.0}), config)
    assert [r.status for r in results] == ["fail", "warn"]


def test_failing_tests_block_regardless_of_coverage() -> None:
    tool = FakeTool("npm test", code=1, stdout=coverage_table("99") + "1 failed\n")
    results = run_coverage(tool, CONFIG)
    assert len(results) == 1
    assert results[0].name == "tests"
    assert results[0].blocking
    assert "exited 1" in results[0].detail


def test_passing_tests_evaluate_coverage() -> None:
    tool = FakeTool("npm test", stdout=coverage_table("75", {"app.js": "10"}))
    results = run_coverage(tool, CONFIG)
    assert [(r.name, r.status) for r in results] == [
        ("tests", "pass"),
        ("coverage", "pass"),
        ("file-coverage", "warn"),
    ]


def test_parse_per_file_dotted_directory_names() -> None:
    output = "\n".join(
        [
            "All files     |      70 |",
            " src/v1.2     |      60 |",
            "  routes.js   |      15 |",
            "  models.js   |      90 |",
            " src/lib.d    |      80 |",
            "  index.js    |      10 |",
        ]
    )
    assert parse_per_file(output) == {
        "src/v1.2/routes.js": 15.0,
        "src/v1.2/models.js": 90.0,
        "src/lib.d/index.js": 10.0,
    }
