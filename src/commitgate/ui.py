from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from commitgate.types import CheckResult, GateOutcome

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

STATUS_SYMBOLS: dict[str, str] = {"pass": "✅", "fail": "❌", "warn": "⚠️ "}
STATUS_STYLES: dict[str, str] = {"pass": "green", "fail": "bold red", "warn": "yellow"}


def color_enabled() -> bool:
    return os.getenv("NO_COLOR") is None and os.getenv("COMMITGATE_COLOR", "1") == "1"


def configure_logging(verbose: bool) -> None:
    """Route commitgate loggers to stderr through rich."""
    root = logging.getLogger("commitgate")
    root.handlers.clear()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.addHandler(RichHandler(console=err_console, show_time=False, show_path=False))
    root.propagate = False


def print_heading(message: str) -> None:
    console.print(Text(message, style="bold cyan" if color_enabled() else ""))


def print_result(result: CheckResult) -> None:
    """One labeled status line per check; multi-line details are indented below."""
    first, _, rest = result.detail.partition("\n")
    style = STATUS_STYLES[result.status] if color_enabled() else ""
    console.print(Text(f"{STATUS_SYMBOLS[result.status]} {first}", style=style))
    if rest:
        console.print(Text(rest))


def print_summary(outcome: GateOutcome, *, stage: str) -> None:
    console.print()
    if outcome.warnings:
        noun = "warning" if len(outcome.warnings) == 1 else "warnings"
        console.print(Text(f"{len(outcome.warnings)} {noun} (not blocking)", style="yellow" if color_enabled() else ""))
    if outcome.blocked:
        gates = ", ".join(outcome.failed_gates)
        console.print(Text(f"❌ {stage} blocked by: {gates}", style="bold white on red" if color_enabled() else ""))
    else:
        console.print(Text(f"✅ {stage} checks passed", style="bold green" if color_enabled() else ""))
