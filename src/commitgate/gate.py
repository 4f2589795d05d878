"""Pre-commit gate orchestration.

The gate walks a fixed sequence of stages and visits every one on every
run, even after a hard gate has already failed, so one invocation reports
everything. Nothing is cached between runs: the staged set, file contents
and tool output are re-read each time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from commitgate import ui
from commitgate.config import GateConfig
from commitgate.coverage import run_coverage
from commitgate.docs_check import check_doc_update
from commitgate.exec import CommandRunner, ToolRunner
from commitgate.lint import run_lint
from commitgate.scan import scan_staged_sources
from commitgate.staged import PathPredicate, list_staged_files, resolve_repo_root, source_predicate
from commitgate.types import CheckResult, GateOutcome, StagedFileSet

logger = logging.getLogger(__name__)


class GateStage(str, Enum):
    """Pre-commit gate states, in visiting order."""

    IDLE = "idle"
    LINT_CHECKED = "lint_checked"
    PATTERN_CHECKED = "pattern_checked"
    COVERAGE_CHECKED = "coverage_checked"
    DOC_CHECKED = "doc_checked"
    DONE = "done"


@dataclass
class PreCommitGate:
    """Runs lint, pattern, coverage and doc checks against the staged set."""

    repo_root: Path
    config: GateConfig
    lint_runner: ToolRunner
    test_runner: ToolRunner
    echo: bool = True
    stage: GateStage = GateStage.IDLE
    visited: list[GateStage] = field(default_factory=list)

    @classmethod
    def for_repo(cls, repo_root: Path, config: GateConfig, *, echo: bool = True) -> PreCommitGate:
        return cls(
            repo_root=repo_root,
            config=config,
            lint_runner=CommandRunner(config.lint_command, repo_root),
            test_runner=CommandRunner(config.test_command, repo_root),
            echo=echo,
        )

    def run(self) -> GateOutcome:
        """Run every stage once and aggregate the results.

        Raises:
            StagedFilesError: If the staged file set cannot be read
        """
        self.stage = GateStage.IDLE
        self.visited = [GateStage.IDLE]
        is_source = source_predicate(self.config.source_extensions)
        staged = list_staged_files(self.repo_root)
        logger.debug("gate: %d staged file(s)", len(staged))

        self._say("🔍 Running pre-commit checks...")
        steps: list[tuple[GateStage, str, Callable[[], list[CheckResult]]]] = [
            (GateStage.LINT_CHECKED, "Running lint...", lambda: [run_lint(self.lint_runner)]),
            (GateStage.PATTERN_CHECKED, "Scanning staged sources...", lambda: self._scan(staged, is_source)),
            (
                GateStage.COVERAGE_CHECKED,
                "Running tests with coverage...",
                lambda: run_coverage(self.test_runner, self.config),
            ),
            (
                GateStage.DOC_CHECKED,
                "Checking documentation updates...",
                lambda: [check_doc_update(staged, is_source)],
            ),
        ]

        results: list[CheckResult] = []
        for stage, heading, step in steps:
            self._say(heading)
            step_results = step()
            for result in step_results:
                logger.debug("gate: %s -> %s", result.name, result.status)
                if self.echo:
                    ui.print_result(result)
            results.extend(step_results)
            self._advance(stage)

        outcome = GateOutcome.from_results(results)
        self._advance(GateStage.DONE)
        if self.echo:
            ui.print_summary(outcome, stage="Commit")
        return outcome

    def _scan(self, staged: StagedFileSet, is_source: PathPredicate) -> list[CheckResult]:
        sources = [p for p in staged if is_source(p)]
        return scan_staged_sources(
            self.repo_root,
            sources,
            forbidden_pattern=self.config.forbidden_pattern,
            doc_scan_mode=self.config.doc_scan_mode,
        )

    def _advance(self, stage: GateStage) -> None:
        self.stage = stage
        self.visited.append(stage)

    def _say(self, message: str) -> None:
        if self.echo:
            ui.print_heading(message)


def run_pre_commit(repo_root: Path, config: GateConfig, *, echo: bool = True) -> GateOutcome:
    """Build the gate for the repository containing ``repo_root`` and run it.

    Raises:
        RuntimeError: If ``repo_root`` is not inside a git repository
    """
    top_level = resolve_repo_root(repo_root)
    return PreCommitGate.for_repo(top_level, config, echo=echo).run()
