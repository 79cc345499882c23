"""Task, Phase and ParseResult data models produced by the tasks.md parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Task:
    id: str
    completed: bool = False
    title: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "completed": self.completed, "title": self.title}


@dataclass
class PhaseDependency:
    """Ordering and parallelism facts declared for one phase number."""

    short_name: str = ""
    depends_on: list[int] = field(default_factory=list)
    blocks: list[int] = field(default_factory=list)
    can_run_parallel_with: list[int] = field(default_factory=list)
    parallel_tasks: list[str] = field(default_factory=list)
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "shortName": self.short_name,
            "dependsOn": list(self.depends_on),
            "blocks": list(self.blocks),
            "canRunParallelWith": list(self.can_run_parallel_with),
            "parallelTasks": list(self.parallel_tasks),
            "description": self.description,
        }


@dataclass
class Phase:
    number: int
    title: str = ""
    priority: str | None = None
    tasks: list[Task] = field(default_factory=list)
    completed_count: int = 0
    total_count: int = 0
    is_complete: bool = False
    dependency: PhaseDependency | None = None

    def finalize(self) -> None:
        """Compute task counts; an empty phase is never complete."""
        self.completed_count = sum(1 for t in self.tasks if t.completed)
        self.total_count = len(self.tasks)
        self.is_complete = self.total_count > 0 and self.completed_count == self.total_count

    def first_pending_task(self) -> Task | None:
        for t in self.tasks:
            if not t.completed:
                return t
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"number": self.number, "title": self.title}
        if self.priority is not None:
            data["priority"] = self.priority
        data["tasks"] = [t.to_dict() for t in self.tasks]
        data["completedCount"] = self.completed_count
        data["totalCount"] = self.total_count
        data["isComplete"] = self.is_complete
        if self.dependency is not None:
            data["dependency"] = self.dependency.to_dict()
        return data


@dataclass
class ParseResult:
    spec_folder: str = ""
    spec_name: str = ""
    phases: list[Phase] = field(default_factory=list)
    total_tasks: int = 0
    completed_tasks: int = 0
    next_phase: Phase | None = None
    next_task: Task | None = None
    available_phases: list[Phase] = field(default_factory=list)

    def get_phase(self, number: int) -> Phase | None:
        for p in self.phases:
            if p.number == number:
                return p
        return None

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-ready structure using the camelCase keys of the export format."""
        data: dict[str, Any] = {
            "specFolder": self.spec_folder,
            "specName": self.spec_name,
            "phases": [p.to_dict() for p in self.phases],
            "totalTasks": self.total_tasks,
            "completedTasks": self.completed_tasks,
            "availablePhases": [p.to_dict() for p in self.available_phases],
        }
        if self.next_phase is not None:
            data["nextPhase"] = self.next_phase.to_dict()
        if self.next_task is not None:
            data["nextTask"] = self.next_task.to_dict()
        return data
