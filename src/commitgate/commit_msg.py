"""Commit-message gate, run by git's commit-msg hook."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from commitgate import ui
from commitgate.config import GateConfig
from commitgate.docs_check import check_doc_update
from commitgate.staged import StagedFilesError, list_staged_files, source_predicate
from commitgate.types import CheckResult, GateOutcome, StagedFileSet

logger = logging.getLogger(__name__)

SKIP_PREFIXES: tuple[str, ...] = ("Merge", "Revert")

EXAMPLE_MESSAGES: tuple[str, ...] = (
    "feat: add user profile endpoint",
    "fix: handle empty cart on checkout",
    "docs: document the auth middleware",
    "refactor: extract pagination helper",
)


def read_message(path: Path) -> str:
    """Message file text, without the trailing newlines git appends."""
    return path.read_text(encoding="utf-8").rstrip("\n")


def _suggestion_block(message: str) -> str:
    examples = "\n".join(f"  {example}" for example in EXAMPLE_MESSAGES)
    return f'Commit message "{message.strip()}" is too generic. Describe what changed, e.g.:\n{examples}'


def validate_commit_message(
    message: str,
    config: GateConfig,
    staged_files: Callable[[], StagedFileSet] | None = None,
) -> GateOutcome:
    """Check a commit message.

    Messages starting with ``Merge`` or ``Revert`` are accepted without any
    check. A message shorter than the minimum length is rejected and no
    further checks run. A message that is exactly one of the generic words
    (case-insensitive, surrounding whitespace ignored) only earns a
    suggestion. ``staged_files`` feeds the documentation reminder; lookup
    failure there is reported as a warning.
    """
    if message.startswith(SKIP_PREFIXES):
        return GateOutcome.from_results(
            [CheckResult(name="message", status="pass", detail="Merge/revert message accepted", hard=True)]
        )

    minimum = config.min_message_length
    if len(message) < minimum:
        return GateOutcome.from_results(
            [
                CheckResult(
                    name="message-length",
                    status="fail",
                    detail=f"Commit message too short ({len(message)} chars, minimum {minimum})",
                    hard=True,
                )
            ]
        )

    results = [
        CheckResult(name="message-length", status="pass", detail="Commit message length OK", hard=True)
    ]

    generic = {word.lower() for word in config.generic_messages}
    if message.strip().lower() in generic:
        results.append(CheckResult(name="generic-message", status="warn", detail=_suggestion_block(message)))

    if staged_files is not None:
        try:
            staged = staged_files()
        except StagedFilesError as exc:
            logger.debug("commit-msg: %s", exc)
            results.append(
                CheckResult(name="docs-update", status="warn", detail=f"Could not check staged files: {exc}")
            )
        else:
            reminder = check_doc_update(staged, source_predicate(config.source_extensions))
            if reminder.status == "warn":
                results.append(reminder)

    return GateOutcome.from_results(results)


def run_commit_msg(message_file: Path, repo_root: Path, config: GateConfig, *, echo: bool = True) -> GateOutcome:
    """Validate the message file git hands to the commit-msg hook."""
    try:
        message = read_message(message_file)
    except OSError as exc:
        raise RuntimeError(f"unable to read commit message file {message_file}: {exc}") from exc

    outcome = validate_commit_message(message, config, staged_files=lambda: list_staged_files(repo_root))
    if echo:
        for result in outcome.results:
            ui.print_result(result)
    return outcome
