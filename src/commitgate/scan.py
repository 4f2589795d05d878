"""Advisory pattern scans over staged source files.

Two sub-checks run here, and neither ever blocks a commit:

* debug-print scan: every line containing the configured forbidden
  substring (``console.log`` by default) is reported as ``path:line``.
* doc-comment scan: a function declaration is "documented" only when the
  line immediately before it closes a doc block (ends with ``*/``).

The doc-comment check is a deliberate single-line-lookback heuristic. It
misses multi-line signatures and flags documented functions whose doc block
is separated from the declaration by a blank line. The opt-in
``skip-blank-lines`` mode steps over blank lines before looking for the
closer; it is not the default.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from commitgate.config import DocScanMode
from commitgate.staged import is_test_file
from commitgate.types import CheckResult

logger = logging.getLogger(__name__)

FUNCTION_DECL_RE = re.compile(r"^\s*(?:export\s+(?:default\s+)?)?(?:async\s+)?function\b")
DOC_BLOCK_CLOSER = "*/"


@dataclass(frozen=True)
class Finding:
    """One flagged line in a staged file."""

    path: str
    line: int
    text: str

    def location(self) -> str:
        return f"{self.path}:{self.line}"


def read_source(repo_root: Path, path: str) -> str:
    """Read a staged file's working-tree text. Raises OSError if unreadable."""
    return (repo_root / path).read_text(encoding="utf-8", errors="replace")


def find_debug_prints(path: str, text: str, pattern: str) -> list[Finding]:
    return [
        Finding(path=path, line=number, text=line.strip())
        for number, line in enumerate(text.splitlines(), 1)
        if pattern in line
    ]


def find_undocumented_functions(
    path: str,
    text: str,
    mode: DocScanMode = "previous-line",
) -> list[Finding]:
    """Function declarations whose preceding line does not close a doc block."""
    lines = text.splitlines()
    findings: list[Finding] = []
    for index, line in enumerate(lines):
        if not FUNCTION_DECL_RE.match(line):
            continue
        if not _preceded_by_doc_block(lines, index, mode):
            findings.append(Finding(path=path, line=index + 1, text=line.strip()))
    return findings


def _preceded_by_doc_block(lines: list[str], index: int, mode: DocScanMode) -> bool:
    lookback = index - 1
    if mode == "skip-blank-lines":
        while lookback >= 0 and not lines[lookback].strip():
            lookback -= 1
    if lookback < 0:
        return False
    return lines[lookback].rstrip().endswith(DOC_BLOCK_CLOSER)


def scan_staged_sources(
    repo_root: Path,
    source_files: Iterable[str],
    *,
    forbidden_pattern: str,
    doc_scan_mode: DocScanMode = "previous-line",
) -> list[CheckResult]:
    """Run both advisory scans over the given staged source files."""
    debug_findings: list[Finding] = []
    doc_findings: list[Finding] = []
    unreadable: list[str] = []

    for path in source_files:
        try:
            text = read_source(repo_root, path)
        except OSError as exc:
            logger.debug("scan: cannot read %s: %s", path, exc)
            unreadable.append(path)
            continue
        debug_findings.extend(find_debug_prints(path, text, forbidden_pattern))
        if not is_test_file(path):
            doc_findings.extend(find_undocumented_functions(path, text, doc_scan_mode))

    results: list[CheckResult] = []

    if debug_findings:
        listing = "\n".join(f"  {f.location()}" for f in debug_findings)
        results.append(
            CheckResult(
                name="debug-prints",
                status="warn",
                detail=f"Found {forbidden_pattern} statements:\n{listing}",
            )
        )
    else:
        results.append(
            CheckResult(name="debug-prints", status="pass", detail=f"No {forbidden_pattern} statements found")
        )

    if doc_findings:
        listing = "\n".join(f"  {f.location()} missing documentation" for f in doc_findings)
        results.append(
            CheckResult(
                name="documentation",
                status="warn",
                detail=f"Functions without a doc comment:\n{listing}",
            )
        )
    else:
        results.append(
            CheckResult(name="documentation", status="pass", detail="All staged functions are documented")
        )

    if unreadable:
        results.append(
            CheckResult(
                name="unreadable-files",
                status="warn",
                detail="Could not read staged files: " + ", ".join(unreadable),
            )
        )

    return results
