"""tasks.md parser: phase headers, task checkboxes and derived progress."""

from __future__ import annotations

import re

from speckit_status import log
from speckit_status.git_ops import spec_name_of
from speckit_status.scheduler import compute_available_phases
from speckit_status.tasks.dependencies import parse_dependencies
from speckit_status.tasks.model import ParseResult, Phase, Task

# "## Phase N: Title" optionally followed by "(Priority: P1)"
PHASE_HEADER_RE = re.compile(r"^##\s+Phase\s+([0-9]+):\s*(.+?)(?:\s*\(Priority:\s*(P[0-9])\))?$")

# "- [X] T001 title" or "- [ ] T001 title"
TASK_LINE_RE = re.compile(r"^-\s+\[(X| )\]\s+(T[0-9]+)\s+(.*)$")


def parse_phase_header(line: str) -> Phase | None:
    m = PHASE_HEADER_RE.match(line)
    if not m:
        return None
    return Phase(number=int(m.group(1)), title=m.group(2).strip(), priority=m.group(3))


def parse_task_line(line: str) -> Task | None:
    m = TASK_LINE_RE.match(line)
    if not m:
        return None
    return Task(id=m.group(2), completed=m.group(1) == "X", title=m.group(3).strip())


def parse_phases(content: str) -> list[Phase]:
    """Scan the document once, grouping task lines under the preceding phase header.

    Task lines before the first header have no phase and are dropped.
    """
    phases: list[Phase] = []
    current: Phase | None = None

    for line in content.splitlines():
        phase = parse_phase_header(line)
        if phase is not None:
            current = phase
            phases.append(current)
            continue

        task = parse_task_line(line)
        if task is not None and current is not None:
            current.tasks.append(task)

    for phase in phases:
        phase.finalize()
    return phases


def parse_tasks_file(content: str, spec_folder: str) -> ParseResult:
    """Parse tasks.md *content* into a :class:`ParseResult`.

    Never raises for malformed content. Passing something other than a
    string is a programming error and raises ``TypeError``.
    """
    if not isinstance(content, str):
        raise TypeError(f"content must be str, not {type(content).__name__}")

    phases = parse_phases(content)

    dependencies = parse_dependencies(content)
    for phase in phases:
        dep = dependencies.get(phase.number)
        if dep is not None:
            phase.dependency = dep

    next_phase = next((p for p in phases if not p.is_complete), None)
    next_task = next_phase.first_pending_task() if next_phase is not None else None

    available = set(compute_available_phases(phases))
    available_phases = sorted(
        (p for p in phases if p.number in available and not p.is_complete),
        key=lambda p: p.number,
    )

    log.debug(
        f"Parsed {len(phases)} phase(s), {len(dependencies)} dependency record(s), "
        f"available: {[p.number for p in available_phases]}"
    )

    return ParseResult(
        spec_folder=spec_folder,
        spec_name=spec_name_of(spec_folder),
        phases=phases,
        total_tasks=sum(p.total_count for p in phases),
        completed_tasks=sum(p.completed_count for p in phases),
        next_phase=next_phase,
        next_task=next_task,
        available_phases=available_phases,
    )
