"""Shared result types for commitgate checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

CheckStatus = Literal["pass", "fail", "warn"]

StagedFileSet = tuple[str, ...]


@dataclass(frozen=True)
class CheckResult:
    """Individual check result.

    ``hard`` marks a result produced by a hard gate; only a hard ``fail``
    blocks the commit.
    """

    name: str
    status: CheckStatus
    detail: str
    hard: bool = False

    @property
    def blocking(self) -> bool:
        return self.hard and self.status == "fail"


@dataclass(frozen=True)
class CoverageReport:
    """Parsed view of a coverage tool's text output."""

    overall_percent: float | None
    per_file: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class GateOutcome:
    """Aggregate of one gate run. ``blocked`` decides the exit code."""

    blocked: bool
    warnings: tuple[str, ...]
    results: tuple[CheckResult, ...]

    @property
    def exit_code(self) -> int:
        return 1 if self.blocked else 0

    @property
    def failed_gates(self) -> tuple[str, ...]:
        return tuple(r.name for r in self.results if r.blocking)

    @classmethod
    def from_results(cls, results: list[CheckResult]) -> GateOutcome:
        return cls(
            blocked=any(r.blocking for r in results),
            warnings=tuple(r.detail for r in results if r.status == "warn"),
            results=tuple(results),
        )
