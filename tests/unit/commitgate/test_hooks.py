"""Tests for git hook installation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from commitgate.hooks import HOOKS, hooks_status, install_hooks, render_hook
from gate_test_utils import GitStub, exec_result

HOOKS_PATH_ARGS = ("rev-parse", "--git-path", "hooks")


@pytest.fixture
def repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / ".git" / "hooks").mkdir(parents=True)
    stub = GitStub({HOOKS_PATH_ARGS: exec_result(["git", *HOOKS_PATH_ARGS], stdout=".git/hooks\n")})
    monkeypatch.setattr("commitgate.hooks.run_git", stub)
    return tmp_path


def test_install_creates_executable_hooks(repo: Path) -> None:
    report = install_hooks(repo)

    assert report["created"] == ["pre-commit", "commit-msg"]
    for spec in HOOKS:
        target = repo / ".git" / "hooks" / spec.name
        assert target.read_text(encoding="utf-8") == render_hook(spec)
        assert os.access(target, os.X_OK)
    assert 'exec commitgate commit-msg "$1"' in (repo / ".git" / "hooks" / "commit-msg").read_text()


def test_install_is_idempotent(repo: Path) -> None:
    install_hooks(repo)
    second = install_hooks(repo)

    assert second["created"] == []
    assert second["unchanged"] == ["pre-commit", "commit-msg"]


def test_outdated_managed_hook_is_updated(repo: Path) -> None:
    install_hooks(repo)
    hook = repo / ".git" / "hooks" / "pre-commit"
    hook.write_text("#!/bin/sh\n# Installed by commitgate. old\nexec old-command\n", encoding="utf-8")

    report = install_hooks(repo)

    assert report["updated"] == ["pre-commit"]
    assert "exec commitgate pre-commit" in hook.read_text(encoding="utf-8")


def test_foreign_hook_skipped_without_force(repo: Path) -> None:
    hook = repo / ".git" / "hooks" / "pre-commit"
    hook.write_text("#!/bin/sh\nexec husky\n", encoding="utf-8")

    report = install_hooks(repo)

    assert report["skipped"] == ["pre-commit"]
    assert report["created"] == ["commit-msg"]
    assert hook.read_text(encoding="utf-8") == "#!/bin/sh\nexec husky\n"


def test_force_backs_up_foreign_hook(repo: Path) -> None:
    hook = repo / ".git" / "hooks" / "pre-commit"
    hook.write_text("#!/bin/sh\nexec husky\n", encoding="utf-8")

    report = install_hooks(repo, force=True)

    backup = repo / ".git" / "hooks" / "pre-commit.backup"
    assert report["updated"] == ["pre-commit"]
    assert report["backups"] == [str(backup.resolve())]
    assert backup.read_text(encoding="utf-8") == "#!/bin/sh\nexec husky\n"
    assert "commitgate pre-commit" in hook.read_text(encoding="utf-8")


def test_status_reports_presence(repo: Path) -> None:
    before = hooks_status(repo)
    assert [h["exists"] for h in before["hooks"]] == [False, False]

    install_hooks(repo)

    after = hooks_status(repo)
    assert all(h["valid"] for h in after["hooks"])


def test_hooks_dir_lookup_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    stub = GitStub(
        {HOOKS_PATH_ARGS: exec_result(["git", *HOOKS_PATH_ARGS], stderr="fatal: not a git repository", code=128)}
    )
    monkeypatch.setattr("commitgate.hooks.run_git", stub)

    with pytest.raises(RuntimeError, match="unable to locate git hooks directory"):
        install_hooks(tmp_path)
