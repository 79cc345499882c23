"""Phase availability: which phases can be started given what is complete."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from speckit_status import log
from speckit_status.tasks.model import Phase


def compute_available_phases(phases: Iterable[Phase]) -> list[int]:
    """Return sorted numbers of incomplete phases whose prerequisites are all complete.

    A phase without a dependency record, or with an empty ``depends_on``,
    is available as soon as it is incomplete.
    """
    phases = list(phases)
    completed = {p.number for p in phases if p.is_complete}

    available: list[int] = []
    for phase in phases:
        if phase.is_complete:
            continue
        dep = phase.dependency
        if dep is None or all(d in completed for d in dep.depends_on):
            available.append(phase.number)
    return sorted(available)


class PhaseState(str, Enum):
    PENDING = "pending"
    DONE = "done"


class PhaseScheduler:
    """Availability view that can be advanced by marking phases done.

    Usage::

        sched = PhaseScheduler(result.phases)
        sched.get_available()        # same as compute_available_phases
        sched.complete_phase(1)      # simulate finishing phase 1
        sched.get_available()        # phases unblocked by that
        sched.explain_block(3)       # "dependsOn: P2 (pending)"
    """

    def __init__(self, phases: Iterable[Phase]) -> None:
        self._state: dict[int, PhaseState] = {}
        self._deps: dict[int, list[int]] = {}

        for phase in phases:
            self._state[phase.number] = PhaseState.DONE if phase.is_complete else PhaseState.PENDING
            self._deps[phase.number] = list(phase.dependency.depends_on) if phase.dependency else []

    # ── state queries ────────────────────────────────────────────

    def state(self, number: int) -> PhaseState:
        return self._state.get(number, PhaseState.PENDING)

    def count_pending(self) -> int:
        return sum(1 for s in self._state.values() if s == PhaseState.PENDING)

    def count_done(self) -> int:
        return sum(1 for s in self._state.values() if s == PhaseState.DONE)

    # ── dependency checks ────────────────────────────────────────

    def deps_satisfied(self, number: int) -> bool:
        for dep in self._deps.get(number, []):
            if self._state.get(dep) != PhaseState.DONE:
                return False
        return True

    def get_available(self) -> list[int]:
        """Pending phases whose dependencies are done, ascending."""
        return sorted(
            n for n, st in self._state.items()
            if st == PhaseState.PENDING and self.deps_satisfied(n)
        )

    # ── transitions ──────────────────────────────────────────────

    def complete_phase(self, number: int) -> None:
        self._state[number] = PhaseState.DONE
        log.debug(f"Phase {number}: pending -> done")

    def reopen_phase(self, number: int) -> None:
        self._state[number] = PhaseState.PENDING
        log.debug(f"Phase {number}: done -> pending")

    # ── diagnostics ──────────────────────────────────────────────

    def check_deadlock(self) -> bool:
        """Return ``True`` if phases remain but none can start."""
        return self.count_pending() > 0 and not self.get_available()

    def blocked_by(self, number: int) -> list[int]:
        """Prerequisites of *number* that are not done yet."""
        return [d for d in self._deps.get(number, []) if self._state.get(d) != PhaseState.DONE]

    def explain_block(self, number: int) -> str:
        """Human-readable explanation of why phase *number* is blocked."""
        blocked = []
        for dep in self.blocked_by(number):
            st = self._state.get(dep)
            blocked.append(f"P{dep} ({st.value if st else 'missing'})")
        if not blocked:
            return ""
        return f"dependsOn: {' '.join(blocked)}"
