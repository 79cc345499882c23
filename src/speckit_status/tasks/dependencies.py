"""Parser for the "Dependencies & Execution Order" section of tasks.md.

The section is loosely structured prose, for example::

    ## Dependencies & Execution Order

    ### Phase Dependencies

    - **Phase 1 (Setup)**: No dependencies, BLOCKS all other phases
    - **Phase 2 (US9 Navigation)**: Depends on Phase 1, Can run parallel to Phase 3/4

    ### Parallel Opportunities

    **Phase 1 (Setup)**: T002-T018 can mostly run in parallel after T001

Nothing in here raises on malformed input: unmatched lines, missing
sections and unparseable numbers are skipped and whatever could be
recognized is returned.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from speckit_status import log
from speckit_status.tasks.model import PhaseDependency

SECTION_MARKER = "## Dependencies & Execution Order"
PHASE_DEPENDENCIES_HEADER = "### Phase Dependencies"
PARALLEL_OPPORTUNITIES_HEADER = "### Parallel Opportunities"

# "- **Phase 1 (Setup)**: description"
PHASE_DEP_LINE_RE = re.compile(r"^-\s+\*\*Phase\s+([0-9]+)\s+\(([^)]+)\)\*\*:\s*(.+)$")
# "**Phase 1 (Setup)**: T002-T018 can mostly run in parallel"
PARALLEL_LINE_RE = re.compile(r"^\*\*Phase\s+([0-9]+)\s+\([^)]+\)\*\*:\s*(.+)$")

DEPENDS_ON_ALL_RE = re.compile(r"depends on all", re.IGNORECASE)
DEPENDS_ON_RE = re.compile(r"[Dd]epends on Phase ([0-9]+)")
BLOCKS_ALL_RE = re.compile(r"BLOCKS all", re.IGNORECASE)
BLOCKS_RE = re.compile(r"[Bb]locks Phase ([0-9]+)")
PARALLEL_TO_RE = re.compile(r"parallel to Phases?\s*([0-9/]+)")

TASK_RANGE_RE = re.compile(r"T([0-9]+)-T([0-9]+)")
TASK_ID_RE = re.compile(r"T([0-9]+)")


# ── extraction strategies ────────────────────────────────────────────
#
# Each strategy returns ``None`` when it does not apply, so the first one
# that returns a list wins.

PhaseExtractor = Callable[[str, int, Sequence[int]], list[int] | None]


def depends_on_all(description: str, number: int, all_numbers: Sequence[int]) -> list[int] | None:
    if not DEPENDS_ON_ALL_RE.search(description):
        return None
    return [n for n in all_numbers if n < number]


def depends_on_phases(description: str, number: int, all_numbers: Sequence[int]) -> list[int] | None:
    return [int(m) for m in DEPENDS_ON_RE.findall(description)]


def blocks_all(description: str, number: int, all_numbers: Sequence[int]) -> list[int] | None:
    if not BLOCKS_ALL_RE.search(description):
        return None
    return [n for n in all_numbers if n > number]


def blocks_phases(description: str, number: int, all_numbers: Sequence[int]) -> list[int] | None:
    return [int(m) for m in BLOCKS_RE.findall(description)]


DEPENDS_ON_STRATEGIES: tuple[PhaseExtractor, ...] = (depends_on_all, depends_on_phases)
BLOCKS_STRATEGIES: tuple[PhaseExtractor, ...] = (blocks_all, blocks_phases)


def first_match(
    strategies: Sequence[PhaseExtractor],
    description: str,
    number: int,
    all_numbers: Sequence[int],
) -> list[int]:
    """Run *strategies* in order and return the first non-``None`` result."""
    for strategy in strategies:
        found = strategy(description, number, all_numbers)
        if found is not None:
            return found
    return []


def parallel_phases(description: str) -> list[int]:
    """``"Can run parallel to Phase 6/7"`` -> ``[6, 7]``."""
    m = PARALLEL_TO_RE.search(description)
    if not m:
        return []
    phases: list[int] = []
    for part in m.group(1).split("/"):
        try:
            phases.append(int(part.strip()))
        except ValueError:
            continue
    return phases


def expand_task_ids(description: str) -> list[str]:
    """Collect task IDs from ranges (``T002-T018``) and single mentions (``T071``).

    Range members are zero-padded to three digits; single IDs are padded
    to at least three. The result is deduplicated and sorted.
    """
    ids: list[str] = []
    from_ranges: set[str] = set()

    for m in TASK_RANGE_RE.finditer(description):
        start, end = int(m.group(1)), int(m.group(2))
        for i in range(start, end + 1):
            tid = f"T{i:03d}"
            ids.append(tid)
            from_ranges.add(tid)

    for digits in TASK_ID_RE.findall(description):
        tid = f"T{digits.rjust(3, '0')}"
        if tid not in from_ranges:
            ids.append(tid)

    return sorted(set(ids))


# ── section scanning ─────────────────────────────────────────────────


class ScanState(str, Enum):
    BEFORE_SECTION = "before-section"
    IN_SECTION = "in-section"
    IN_PHASE_DEPENDENCIES = "in-phase-dependencies"
    IN_PARALLEL_OPPORTUNITIES = "in-parallel-opportunities"
    DONE = "done"


@dataclass
class SectionScan:
    """Lines belonging to each sub-block of the dependency section."""

    found_section: bool = False
    phase_dependency_lines: list[str] = field(default_factory=list)
    parallel_lines: list[str] = field(default_factory=list)


def _enter_subsection(line: str, seen: set[ScanState]) -> ScanState | None:
    """Return the sub-block a header line opens, if it is one not yet visited."""
    if PHASE_DEPENDENCIES_HEADER in line and ScanState.IN_PHASE_DEPENDENCIES not in seen:
        return ScanState.IN_PHASE_DEPENDENCIES
    if PARALLEL_OPPORTUNITIES_HEADER in line and ScanState.IN_PARALLEL_OPPORTUNITIES not in seen:
        return ScanState.IN_PARALLEL_OPPORTUNITIES
    return None


def _after_subsection(seen: set[ScanState]) -> ScanState:
    if {ScanState.IN_PHASE_DEPENDENCIES, ScanState.IN_PARALLEL_OPPORTUNITIES} <= seen:
        return ScanState.DONE
    return ScanState.IN_SECTION


def scan_section(lines: Sequence[str]) -> SectionScan:
    """Split the document into Phase Dependencies and Parallel Opportunities lines.

    Transitions:

    - BEFORE_SECTION -> IN_SECTION on the section marker line.
    - IN_SECTION -> IN_PHASE_DEPENDENCIES / IN_PARALLEL_OPPORTUNITIES on the
      first occurrence of the matching ``###`` header.
    - IN_PHASE_DEPENDENCIES ends on any ``###`` or ``## `` header.
    - IN_PARALLEL_OPPORTUNITIES ends on a ``---`` separator or ``## `` header.
    - DONE once both sub-blocks have been read.
    """
    scan = SectionScan()
    state = ScanState.BEFORE_SECTION
    seen: set[ScanState] = set()

    for line in lines:
        if state == ScanState.DONE:
            break

        if state == ScanState.BEFORE_SECTION:
            if SECTION_MARKER in line:
                scan.found_section = True
                state = ScanState.IN_SECTION
            continue

        if state == ScanState.IN_PHASE_DEPENDENCIES:
            if line.startswith("###") or line.startswith("## ") or PARALLEL_OPPORTUNITIES_HEADER in line:
                state = _after_subsection(seen)
            else:
                if line.strip():
                    scan.phase_dependency_lines.append(line)
                continue

        elif state == ScanState.IN_PARALLEL_OPPORTUNITIES:
            if line.startswith("---") or line.startswith("## "):
                state = _after_subsection(seen)
                continue
            if _enter_subsection(line, seen) is None:
                if line.strip():
                    scan.parallel_lines.append(line)
                continue
            state = ScanState.IN_SECTION

        if state == ScanState.IN_SECTION:
            nxt = _enter_subsection(line, seen)
            if nxt is not None:
                seen.add(nxt)
                state = nxt

    return scan


# ── line parsing ─────────────────────────────────────────────────────


def collect_phase_numbers(lines: Sequence[str]) -> list[int]:
    """Every phase number named by a Phase Dependencies line anywhere in the document."""
    numbers: list[int] = []
    for line in lines:
        m = PHASE_DEP_LINE_RE.match(line)
        if m:
            n = int(m.group(1))
            if n not in numbers:
                numbers.append(n)
    return numbers


def parse_phase_dependency_line(
    line: str, all_numbers: Sequence[int]
) -> tuple[int, PhaseDependency] | None:
    m = PHASE_DEP_LINE_RE.match(line)
    if not m:
        return None

    number = int(m.group(1))
    description = m.group(3)
    return number, PhaseDependency(
        short_name=m.group(2),
        depends_on=first_match(DEPENDS_ON_STRATEGIES, description, number, all_numbers),
        blocks=first_match(BLOCKS_STRATEGIES, description, number, all_numbers),
        can_run_parallel_with=parallel_phases(description),
        description=description,
    )


def parse_parallel_opportunities(lines: Sequence[str]) -> dict[int, list[str]]:
    """Map phase number -> parallelizable task IDs; phases with no IDs are left out."""
    result: dict[int, list[str]] = {}
    for line in lines:
        m = PARALLEL_LINE_RE.match(line)
        if not m:
            continue
        tasks = expand_task_ids(m.group(2))
        if tasks:
            result[int(m.group(1))] = tasks
    return result


def link_reverse_edges(deps: dict[int, PhaseDependency]) -> None:
    """If B depends on A and A has a record, add B to A's blocks; then sort."""
    for number, dep in deps.items():
        for target in dep.depends_on:
            blocker = deps.get(target)
            if blocker is not None and number not in blocker.blocks:
                blocker.blocks.append(number)

    for dep in deps.values():
        dep.blocks = sorted(set(dep.blocks))


def parse_dependencies(content: str) -> dict[int, PhaseDependency]:
    """Parse the dependency section into a mapping of phase number -> record.

    Records may exist for phase numbers that have no phase header in the
    document (e.g. a phase only mentioned under Parallel Opportunities).
    """
    if not isinstance(content, str):
        raise TypeError(f"content must be str, not {type(content).__name__}")

    lines = content.splitlines()
    scan = scan_section(lines)
    result: dict[int, PhaseDependency] = {}
    if not scan.found_section:
        return result

    all_numbers = collect_phase_numbers(lines)

    for line in scan.phase_dependency_lines:
        parsed = parse_phase_dependency_line(line, all_numbers)
        if parsed is not None:
            number, dep = parsed
            result[number] = dep

    for number, tasks in parse_parallel_opportunities(scan.parallel_lines).items():
        existing = result.get(number)
        if existing is not None:
            existing.parallel_tasks = tasks
        else:
            result[number] = PhaseDependency(parallel_tasks=tasks)

    link_reverse_edges(result)
    log.debug(f"Dependency section: {len(result)} phase record(s)")
    return result
