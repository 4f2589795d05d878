"""Staged file listing and path predicates."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from pathlib import Path, PurePosixPath

from commitgate.exec import ExecError, run_git
from commitgate.types import StagedFileSet

PathPredicate = Callable[[str], bool]

TEST_FILE_RE = re.compile(r"\.(test|spec)\.[^./]+$")


class StagedFilesError(RuntimeError):
    """Raised when the staged file set cannot be read from git."""


def resolve_repo_root(repo: Path | None = None) -> Path:
    """Resolve git repo root from cwd or explicit path.

    Staged paths are reported relative to this root, so file reads, tool
    runs and config lookup all start here.
    """
    probe = (repo or Path.cwd()).resolve()
    try:
        out = run_git(["rev-parse", "--show-toplevel"], repo_root=probe)
    except ExecError as exc:
        raise RuntimeError(f"unable to resolve git repo root from {probe}: {exc}") from exc
    root = out.stdout.strip()
    if not root:
        raise RuntimeError(f"unable to resolve git repo root from {probe}: empty output")
    return Path(root).resolve()


def list_staged_files(
    repo_root: Path,
    predicate: PathPredicate | None = None,
) -> StagedFileSet:
    """Return paths staged for commit, in git's order, optionally filtered.

    Paths are read NUL-separated with ``core.quotePath`` off, so non-ASCII
    names come back verbatim instead of C-quoted. Deleted paths are excluded
    since there is no content left to inspect.

    Raises:
        StagedFilesError: If git cannot report the index (e.g. not a repository)
    """
    try:
        out = run_git(
            ["-c", "core.quotePath=false", "diff", "--cached", "--name-only", "-z", "--diff-filter=ACMR"],
            repo_root=repo_root,
        )
    except ExecError as exc:
        raise StagedFilesError(f"unable to list staged files in {repo_root}: {exc}") from exc

    paths = [entry for entry in out.stdout.split("\0") if entry.strip()]
    if predicate is not None:
        paths = [p for p in paths if predicate(p)]
    return tuple(paths)


def source_predicate(extensions: Iterable[str]) -> PathPredicate:
    """Build a predicate matching paths that end with any of ``extensions``."""
    suffixes = tuple(extensions)

    def _matches(path: str) -> bool:
        return path.endswith(suffixes)

    return _matches


def is_test_file(path: str) -> bool:
    """True for ``name.test.js`` / ``name.spec.jsx`` style paths."""
    return TEST_FILE_RE.search(PurePosixPath(path).name) is not None


def is_doc_file(path: str) -> bool:
    """True for Markdown files, README.md included."""
    return path.endswith(".md") or PurePosixPath(path).name == "README.md"
