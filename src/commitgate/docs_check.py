"""Documentation-update reminder."""

from __future__ import annotations

from collections.abc import Sequence

from commitgate.staged import PathPredicate, is_doc_file
from commitgate.types import CheckResult

DOC_REMINDER = "Source files changed but no documentation (*.md) is staged. Consider updating the docs."


def check_doc_update(staged_files: Sequence[str], is_source: PathPredicate) -> CheckResult:
    """Advisory: remind when source changed without any staged Markdown."""
    has_source = any(is_source(p) for p in staged_files)
    has_docs = any(is_doc_file(p) for p in staged_files)
    if has_source and not has_docs:
        return CheckResult(name="docs-update", status="warn", detail=DOC_REMINDER)
    if has_docs:
        return CheckResult(name="docs-update", status="pass", detail="Documentation updated")
    return CheckResult(name="docs-update", status="pass", detail="No source changes needing documentation")
