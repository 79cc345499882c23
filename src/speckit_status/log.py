"""Console logging for speckit-status, coloured via Rich.

Status output goes to stdout, errors to stderr. Debug lines are hidden
unless ``--verbose`` was given.
"""

from __future__ import annotations

from rich.console import Console

console = Console(highlight=False)
err_console = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def error(msg: str) -> None:
    err_console.print(f"[red]Error:[/red] {msg}")


def debug(msg: str) -> None:
    if _verbose:
        err_console.print(f"[dim]\\[debug] {msg}[/dim]")
