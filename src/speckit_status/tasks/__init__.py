"""tasks.md parsing: phases, tasks and the dependency section."""

from speckit_status.tasks.dependencies import expand_task_ids, parse_dependencies
from speckit_status.tasks.model import ParseResult, Phase, PhaseDependency, Task
from speckit_status.tasks.parser import parse_tasks_file

__all__ = [
    "ParseResult",
    "Phase",
    "PhaseDependency",
    "Task",
    "expand_task_ids",
    "parse_dependencies",
    "parse_tasks_file",
]
