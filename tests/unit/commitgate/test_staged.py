"""Tests for staged file listing and path predicates."""

from __future__ import annotations

from pathlib import Path

import pytest

from commitgate.staged import (
    StagedFilesError,
    is_doc_file,
    is_test_file,
    list_staged_files,
    resolve_repo_root,
    source_predicate,
)
from gate_test_utils import GitStub, exec_result

DIFF_ARGS = ("-c", "core.quotePath=false", "diff", "--cached", "--name-only", "-z", "--diff-filter=ACMR")
TOPLEVEL_ARGS = ("rev-parse", "--show-toplevel")


def _diff(stdout: str = "", stderr: str = "", code: int = 0):
    return exec_result(["git", *DIFF_ARGS], stdout=stdout, stderr=stderr, code=code)


def test_lists_staged_files_in_git_order(monkeypatch: pytest.MonkeyPatch) -> None:
    stub = GitStub({DIFF_ARGS: _diff("src/b.js\0README.md\0src/a.jsx\0")})
    monkeypatch.setattr("commitgate.staged.run_git", stub)

    assert list_staged_files(Path("/repo")) == ("src/b.js", "README.md", "src/a.jsx")


def test_predicate_filters(monkeypatch: pytest.MonkeyPatch) -> None:
    stub = GitStub({DIFF_ARGS: _diff("src/b.js\0README.md\0src/a.jsx\0style.css\0")})
    monkeypatch.setattr("commitgate.staged.run_git", stub)

    staged = list_staged_files(Path("/repo"), source_predicate([".js", ".jsx"]))
    assert staged == ("src/b.js", "src/a.jsx")


def test_non_ascii_and_spaced_paths_kept_verbatim(monkeypatch: pytest.MonkeyPatch) -> None:
    stub = GitStub({DIFF_ARGS: _diff("src/café.js\0src/my file.jsx\0")})
    monkeypatch.setattr("commitgate.staged.run_git", stub)

    staged = list_staged_files(Path("/repo"), source_predicate([".js", ".jsx"]))
    assert staged == ("src/café.js", "src/my file.jsx")


def test_git_failure_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    stub = GitStub({DIFF_ARGS: _diff(stderr="fatal: not a git repository", code=128)})
    monkeypatch.setattr("commitgate.staged.run_git", stub)

    with pytest.raises(StagedFilesError, match="not a git repository"):
        list_staged_files(Path("/repo"))


def test_resolve_repo_root_uses_toplevel(monkeypatch: pytest.MonkeyPatch) -> None:
    stub = GitStub({TOPLEVEL_ARGS: exec_result(["git", *TOPLEVEL_ARGS], stdout="/repo\n")})
    monkeypatch.setattr("commitgate.staged.run_git", stub)

    assert resolve_repo_root(Path("/repo/src/components")) == Path("/repo").resolve()


def test_resolve_repo_root_outside_repository(monkeypatch: pytest.MonkeyPatch) -> None:
    stub = GitStub(
        {TOPLEVEL_ARGS: exec_result(["git", *TOPLEVEL_ARGS], stderr="fatal: not a git repository", code=128)}
    )
    monkeypatch.setattr("commitgate.staged.run_git", stub)

    with pytest.raises(RuntimeError, match="unable to resolve git repo root"):
        resolve_repo_root(Path("/tmp/elsewhere"))


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("src/app.test.js", True),
        ("src/app.spec.jsx", True),
        ("src/app.js", False),
        ("src/testing.js", False),
        ("src/test/app.js", False),
        ("src/contest.js", False),
    ],
)
def test_is_test_file(path: str, expected: bool) -> None:
    assert is_test_file(path) is expected


def test_is_doc_file() -> None:
    assert is_doc_file("README.md")
    assert is_doc_file("docs/api.md")
    assert not is_doc_file("src/markdown.js")
    assert not is_doc_file("notes.txt")
