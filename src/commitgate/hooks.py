"""Git hook installation for commitgate."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from commitgate.exec import ExecError, run_git

logger = logging.getLogger(__name__)

HOOK_MARKER = "# Installed by commitgate."


@dataclass(frozen=True)
class HookSpec:
    """Managed hook file spec."""

    name: str
    command: str


HOOKS: tuple[HookSpec, ...] = (
    HookSpec(name="pre-commit", command="commitgate pre-commit"),
    HookSpec(name="commit-msg", command='commitgate commit-msg "$1"'),
)


def render_hook(spec: HookSpec) -> str:
    return (
        "#!/usr/bin/env bash\n"
        f"{HOOK_MARKER} Re-run `commitgate install-hooks` to update.\n"
        "set -euo pipefail\n"
        f"exec {spec.command}\n"
    )


def resolve_hooks_dir(repo_root: Path) -> Path:
    """Hooks directory git will actually use (honours worktrees and core.hooksPath)."""
    try:
        out = run_git(["rev-parse", "--git-path", "hooks"], repo_root=repo_root)
    except ExecError as exc:
        raise RuntimeError(f"unable to locate git hooks directory from {repo_root}: {exc}") from exc
    hooks_dir = out.stdout.strip()
    if not hooks_dir:
        raise RuntimeError(f"unable to locate git hooks directory from {repo_root}: empty output")
    return (repo_root / hooks_dir).resolve()


def install_hooks(repo_root: Path, *, force: bool = False) -> dict[str, Any]:
    """Write the pre-commit and commit-msg hooks.

    Hooks written by commitgate are updated in place. A foreign hook is left
    alone unless ``force`` is set, in which case it is moved to
    ``<name>.backup`` first.
    """
    hooks_dir = resolve_hooks_dir(repo_root)
    hooks_dir.mkdir(parents=True, exist_ok=True)

    created: list[str] = []
    updated: list[str] = []
    unchanged: list[str] = []
    skipped: list[str] = []
    backups: list[str] = []

    for spec in HOOKS:
        target = hooks_dir / spec.name
        expected = render_hook(spec)

        if target.exists():
            actual = target.read_text(encoding="utf-8", errors="replace")
            if actual == expected:
                unchanged.append(spec.name)
            elif HOOK_MARKER in actual:
                target.write_text(expected, encoding="utf-8")
                updated.append(spec.name)
            elif force:
                backup = target.with_name(f"{spec.name}.backup")
                shutil.move(target, backup)
                backups.append(str(backup))
                target.write_text(expected, encoding="utf-8")
                updated.append(spec.name)
            else:
                logger.debug("hooks: leaving foreign hook %s", target)
                skipped.append(spec.name)
                continue
        else:
            target.write_text(expected, encoding="utf-8")
            created.append(spec.name)

        target.chmod(0o755)

    return {
        "hooks_dir": str(hooks_dir),
        "created": created,
        "updated": updated,
        "unchanged": unchanged,
        "skipped": skipped,
        "backups": backups,
    }


def hooks_status(repo_root: Path) -> dict[str, Any]:
    """Report whether each managed hook is present, current and executable."""
    hooks_dir = resolve_hooks_dir(repo_root)
    states: list[dict[str, Any]] = []
    for spec in HOOKS:
        target = hooks_dir / spec.name
        exists = target.exists()
        content_matches = exists and target.read_text(encoding="utf-8", errors="replace") == render_hook(spec)
        executable_ok = exists and os.access(target, os.X_OK)
        states.append(
            {
                "name": spec.name,
                "path": str(target),
                "exists": exists,
                "content_matches": content_matches,
                "executable_ok": executable_ok,
                "valid": exists and content_matches and executable_ok,
            }
        )
    return {"hooks_dir": str(hooks_dir), "hooks": states}
