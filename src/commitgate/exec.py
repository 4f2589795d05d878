"""Command runners for lint, test and git invocations."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

# Conventional shell exit code for "command not found".
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """Combined stdout and stderr, in that order."""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr


class ExecError(RuntimeError):
    """Raised when a command returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


def run_command(
    argv: list[str],
    *,
    cwd: Path,
    check: bool = True,
) -> ExecResult:
    """Run command and return structured result.

    A missing executable is reported as a result with exit code 127 rather
    than an exception, so callers see the same shape as a shell would give.
    """
    logger.debug("exec: %s (cwd=%s)", " ".join(argv), cwd)
    try:
        completed = subprocess.run(argv, cwd=cwd, capture_output=True, text=True, check=False)
    except OSError as exc:
        result = ExecResult(
            argv=tuple(argv),
            cwd=cwd.resolve(),
            returncode=COMMAND_NOT_FOUND,
            stdout="",
            stderr=f"{argv[0]}: {exc.strerror or exc}",
        )
    else:
        result = ExecResult(
            argv=tuple(argv),
            cwd=cwd.resolve(),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
    logger.debug("exec: %s exited %d", argv[0], result.returncode)
    if check and result.returncode != 0:
        raise ExecError(result)
    return result


def run_git(
    args: list[str],
    *,
    repo_root: Path,
    check: bool = True,
) -> ExecResult:
    """Run git command rooted at repo."""
    return run_command(["git", *args], cwd=repo_root, check=check)


class ToolRunner(Protocol):
    """Anything that runs an external tool and reports exit code and output."""

    def run(self) -> ExecResult: ...

    def describe(self) -> str: ...


@dataclass(frozen=True)
class CommandRunner:
    """A configured external tool, invoked as-is with no extra arguments."""

    argv: tuple[str, ...]
    cwd: Path

    def run(self) -> ExecResult:
        return run_command(list(self.argv), cwd=self.cwd, check=False)

    def describe(self) -> str:
        return " ".join(self.argv)
