"""Terminal and JSON rendering of a ParseResult."""

from __future__ import annotations

import json
import math

from rich.console import Console
from rich.markup import escape

from speckit_status import log
from speckit_status.config import DEFAULT_PARALLEL_PREVIEW, Config
from speckit_status.tasks.model import ParseResult, Phase, Task

CHECK = "✓"
BULLET = "•"
TEE = "├─"
CORNER = "└─"


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def progress_bar(completed: int, total: int, width: int = 20) -> str:
    ratio = completed / total if total > 0 else 0
    filled = _round_half_up(ratio * width)
    return "█" * filled + "░" * (width - filled)


def progress_percent(completed: int, total: int) -> int:
    return _round_half_up(completed / total * 100) if total > 0 else 0


def _progress_style(percent: int) -> str:
    if percent == 100:
        return "green"
    if percent >= 50:
        return "yellow"
    return "red"


def _phase_name(phase: Phase | None) -> str:
    if phase is None:
        return ""
    if phase.dependency is not None:
        return phase.dependency.short_name
    return phase.title


def format_phase_status(phase: Phase, result: ParseResult, show_deps: bool = True) -> str:
    style = "green" if phase.is_complete else "yellow"
    check = f" {CHECK}" if phase.is_complete else ""

    blocked = ""
    if show_deps and phase.dependency is not None and not phase.is_complete:
        waiting = []
        for d in phase.dependency.depends_on:
            dep_phase = result.get_phase(d)
            if dep_phase is not None and not dep_phase.is_complete:
                waiting.append(f"P{d}")
        if waiting:
            blocked = f" [red]\\[blocked by {', '.join(waiting)}][/red]"

    return (
        f"[{style}]Phase {phase.number}:[/{style}] {escape(phase.title)} "
        f"[dim]\\[{phase.completed_count}/{phase.total_count}][/dim][{style}]{check}[/{style}]{blocked}"
    )


def format_task_line(task: Task) -> str:
    if task.completed:
        return f"  [green]\\[{CHECK}][/green] [cyan]{task.id}[/cyan] [dim]{escape(task.title)}[/dim]"
    return f"  [dim]\\[ ][/dim] [cyan]{task.id}[/cyan] {escape(task.title)}"


def format_dependency_info(
    phase: Phase, result: ParseResult, preview: int = DEFAULT_PARALLEL_PREVIEW
) -> list[str]:
    dep = phase.dependency
    if dep is None:
        return []

    lines: list[str] = []
    if dep.depends_on:
        parts = []
        for d in dep.depends_on:
            dep_phase = result.get_phase(d)
            done = dep_phase is not None and dep_phase.is_complete
            status = f"[green]{CHECK}[/green]" if done else "[yellow]...[/yellow]"
            parts.append(f"P{d} [dim]({escape(_phase_name(dep_phase))})[/dim] {status}")
        lines.append(f"  [dim]{TEE} Depends on:[/dim] {', '.join(parts)}")

    if dep.blocks:
        parts = []
        for b in dep.blocks:
            block_phase = result.get_phase(b)
            name = block_phase.dependency.short_name if block_phase and block_phase.dependency else ""
            parts.append(f"P{b} [dim]({escape(name)})[/dim]" if name else f"P{b}")
        lines.append(f"  [dim]{TEE} Blocks:[/dim] {', '.join(parts)}")

    if dep.parallel_tasks:
        tasks = dep.parallel_tasks
        if len(tasks) > preview:
            shown = f"{', '.join(tasks[:preview])}... ({len(tasks)} total)"
        else:
            shown = ", ".join(tasks)
        lines.append(f"  [dim]{CORNER} Parallel tasks:[/dim] [cyan]{shown}[/cyan]")

    return lines


def format_output(result: ParseResult, cfg: Config, console: Console | None = None) -> None:
    """Print the human-readable status report."""
    out = console or log.console

    out.print()
    out.print(f"[bold]{escape(result.spec_name)}[/bold] [dim]Tasks[/dim]")
    out.print("=" * (len(result.spec_name) + 6))
    out.print()

    percent = progress_percent(result.completed_tasks, result.total_tasks)
    style = _progress_style(percent)
    bar = progress_bar(result.completed_tasks, result.total_tasks)
    out.print(
        f"[bold]Progress:[/bold] [{style}]{bar}[/{style}] "
        f"{result.completed_tasks}/{result.total_tasks} ({percent}%)"
    )
    out.print()

    if cfg.phase is not None:
        _print_phase_detail(out, result, cfg)
        out.print()
        return

    for phase in result.phases:
        out.print(format_phase_status(phase, result))
    out.print()

    nxt = result.next_phase
    if nxt is None:
        out.print(f"[bold green]{CHECK} All phases complete![/bold green]")
        out.print()
        return

    out.print(f"[bold]Next Phase:[/bold] [cyan]Phase {nxt.number}[/cyan] - {escape(nxt.title)}")
    for line in format_dependency_info(nxt, result, cfg.parallel_preview):
        out.print(line)
    first = nxt.first_pending_task()
    if first is not None:
        out.print(f"  [dim]Start with:[/dim] [cyan]{first.id}[/cyan] {escape(first.title)}")
    out.print()

    others = [p for p in result.available_phases if p.number != nxt.number]
    if others:
        out.print("[bold]Can Run in Parallel:[/bold] [dim](dependencies satisfied)[/dim]")
        for phase in others:
            after = ""
            depends_on = phase.dependency.depends_on if phase.dependency else []
            if depends_on:
                after = f" [dim](after {', '.join(f'P{d}' for d in depends_on)})[/dim]"
            out.print(f"  [magenta]{BULLET}[/magenta] Phase {phase.number}: {escape(_phase_name(phase))}{after}")
        out.print()


def _print_phase_detail(out: Console, result: ParseResult, cfg: Config) -> None:
    phase = result.get_phase(cfg.phase) if cfg.phase is not None else None
    if phase is None:
        out.print(f"[red]Phase {cfg.phase} not found[/red]")
        return

    out.print(format_phase_status(phase, result, show_deps=False))
    for line in format_dependency_info(phase, result, cfg.parallel_preview):
        out.print(line)
    out.print()
    for task in phase.tasks:
        if cfg.show_all or not task.completed:
            out.print(format_task_line(task))


def format_json(result: ParseResult) -> str:
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
