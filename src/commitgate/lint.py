"""Lint hard gate."""

from __future__ import annotations

from commitgate.exec import ToolRunner
from commitgate.types import CheckResult

MAX_DETAIL_LINES = 20


def tail_output(text: str, limit: int = MAX_DETAIL_LINES) -> str:
    """Last ``limit`` non-empty lines of tool output."""
    lines = [line for line in text.splitlines() if line.strip()]
    return "\n".join(lines[-limit:])


def run_lint(runner: ToolRunner) -> CheckResult:
    """Run the project's lint command; non-zero exit blocks the commit."""
    result = runner.run()
    if result.returncode == 0:
        return CheckResult(name="lint", status="pass", detail="Lint passed", hard=True)

    detail = f"Lint failed ({runner.describe()} exited {result.returncode})"
    output = tail_output(result.output)
    if output:
        detail = f"{detail}\n{output}"
    return CheckResult(name="lint", status="fail", detail=detail, hard=True)
