"""commitgate CLI - git hook entry points and helpers."""

from __future__ import annotations

from pathlib import Path

import typer

from commitgate import __version__, ui
from commitgate.commit_msg import run_commit_msg
from commitgate.config import GateConfig, load_gate_config
from commitgate.docgen import generate_docs
from commitgate.gate import run_pre_commit
from commitgate.hooks import hooks_status, install_hooks
from commitgate.staged import resolve_repo_root

cli = typer.Typer(
    name="commitgate",
    help="commitgate - local commit-quality gate for git hooks",
    no_args_is_help=True,
)

REPO_OPTION_HELP = "Path inside the repository (defaults to current working directory)."


@cli.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log subprocess and config details to stderr."),
) -> None:
    ui.configure_logging(verbose)


def _repo(repo: Path | None) -> Path:
    """Top level of the repository containing ``repo`` (or the cwd)."""
    try:
        return resolve_repo_root(repo)
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def _load_config(repo_root: Path, **overrides: int | None) -> GateConfig:
    try:
        return load_gate_config(repo_root).with_overrides(**overrides)
    except (RuntimeError, ValueError) as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(1) from exc


@cli.command("pre-commit")
def pre_commit(
    repo: Path | None = typer.Option(None, "--repo", help=REPO_OPTION_HELP),
    min_coverage: int | None = typer.Option(
        None, "--min-coverage", help="Minimum overall coverage percent (overrides config)."
    ),
    min_file_coverage: int | None = typer.Option(
        None, "--min-file-coverage", help="Per-file coverage warning threshold (overrides config)."
    ),
) -> None:
    """Run lint, pattern, coverage and documentation checks on staged changes."""
    repo_root = _repo(repo)
    config = _load_config(repo_root, min_overall_coverage=min_coverage, min_file_coverage=min_file_coverage)
    try:
        outcome = run_pre_commit(repo_root, config)
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    raise typer.Exit(outcome.exit_code)


@cli.command("commit-msg")
def commit_msg(
    message_file: Path = typer.Argument(..., metavar="MSG_FILE", help="Commit message file passed by git."),
    repo: Path | None = typer.Option(None, "--repo", help=REPO_OPTION_HELP),
    min_length: int | None = typer.Option(
        None, "--min-length", help="Minimum commit message length (overrides config)."
    ),
) -> None:
    """Validate a commit message."""
    repo_root = _repo(repo)
    config = _load_config(repo_root, min_message_length=min_length)
    try:
        outcome = run_commit_msg(message_file, repo_root, config)
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    raise typer.Exit(outcome.exit_code)


@cli.command("install-hooks")
def install_hooks_cmd(
    repo: Path | None = typer.Option(None, "--repo", help=REPO_OPTION_HELP),
    force: bool = typer.Option(False, "--force", help="Replace foreign hooks (old file kept as <name>.backup)."),
) -> None:
    """Install the pre-commit and commit-msg hooks into the repository."""
    try:
        report = install_hooks(_repo(repo), force=force)
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    typer.echo(f"hooks_dir={report['hooks_dir']}")
    for key in ("created", "updated", "unchanged", "skipped"):
        typer.echo(f"{key}={','.join(report[key]) or '-'}")
    for backup in report["backups"]:
        typer.echo(f"backup={backup}")
    if report["skipped"]:
        typer.echo("Existing hooks were left in place; re-run with --force to replace them.", err=True)
        raise typer.Exit(1)


@cli.command("hooks-status")
def hooks_status_cmd(
    repo: Path | None = typer.Option(None, "--repo", help=REPO_OPTION_HELP),
) -> None:
    """Show whether the managed hooks are installed and current."""
    try:
        report = hooks_status(_repo(repo))
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    typer.echo(f"hooks_dir={report['hooks_dir']}")
    for state in report["hooks"]:
        typer.echo(
            f"{state['name']}: exists={str(state['exists']).lower()} "
            f"current={str(state['content_matches']).lower()} "
            f"executable={str(state['executable_ok']).lower()}"
        )
    if not all(state["valid"] for state in report["hooks"]):
        raise typer.Exit(1)


@cli.command("docs")
def docs(
    repo: Path | None = typer.Option(None, "--repo", help=REPO_OPTION_HELP),
) -> None:
    """Generate a Markdown API reference from JSDoc comments."""
    repo_root = _repo(repo)
    config = _load_config(repo_root)
    try:
        output, count = generate_docs(repo_root, config)
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    typer.echo(f"Wrote {count} documented function(s) to {output}")


@cli.command("version")
def version() -> None:
    """Print the commitgate version."""
    typer.echo(f"commitgate {__version__}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
