"""Shared fixtures for speckit-status tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- Use the write_file fixture (or _write) so parent dirs exist and files are UTF-8.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from speckit_status import log
from speckit_status.tasks.model import Phase, PhaseDependency, Task

SAMPLE_TASKS_MD = """\
# Tasks: Portfolio Website

## Phase 1: Setup (Priority: P1)

- [X] T001 Create project structure
- [X] T002 [P] Configure linting

## Phase 2: US9 Navigation

- [X] T003 [P] [US9] Build header
- [ ] T004 [US9] Build footer

## Phase 3: US10 Listings

- [ ] T005 [US10] Listing grid
- [ ] T006 [US10] Listing filters

## Phase 4: Polish

- [ ] T007 Final review

---

## Dependencies & Execution Order

### Phase Dependencies

- **Phase 1 (Setup)**: No dependencies, BLOCKS all other phases
- **Phase 2 (US9 Navigation)**: Depends on Phase 1, Can run parallel to Phase 3
- **Phase 3 (US10 Listings)**: Depends on Phase 1, Can run parallel to Phase 2
- **Phase 4 (Polish)**: Depends on all previous phases

### Parallel Opportunities

**Phase 1 (Setup)**: T001-T002 can run in parallel
**Phase 3 (US10 Listings)**: T005, T006

---
"""


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def write_file():
    """Return a writer that creates parent dirs and writes UTF-8 text."""
    return _write


@pytest.fixture(autouse=True)
def _quiet_log():
    """Reset the verbose switch between tests."""
    log.set_verbose(False)
    yield
    log.set_verbose(False)


@pytest.fixture
def sample_tasks_md() -> str:
    return SAMPLE_TASKS_MD


@pytest.fixture
def spec_folder(tmp_path: Path) -> Path:
    """A specs/001-portfolio-website folder holding the sample tasks.md."""
    folder = tmp_path / "specs" / "001-portfolio-website"
    _write(folder / "tasks.md", SAMPLE_TASKS_MD)
    return folder


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a minimal git repo for testing."""
    subprocess.run(["git", "init"], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.name", "Test"], cwd=tmp_path, capture_output=True
    )
    subprocess.run(
        ["git", "config", "user.email", "test@test"], cwd=tmp_path, capture_output=True
    )
    _write(tmp_path / "README.md", "# Test")
    subprocess.run(["git", "add", "README.md"], cwd=tmp_path, capture_output=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial"], cwd=tmp_path, capture_output=True
    )
    return tmp_path


def _make_phase(
    number: int,
    complete: bool = False,
    depends_on: list[int] | None = None,
    title: str = "",
    tasks: int = 1,
) -> Phase:
    phase = Phase(
        number=number,
        title=title or f"Phase {number}",
        tasks=[Task(id=f"T{number}{i:02d}", completed=complete) for i in range(tasks)],
    )
    if depends_on is not None:
        phase.dependency = PhaseDependency(short_name=phase.title, depends_on=depends_on)
    phase.finalize()
    return phase


@pytest.fixture
def make_phase():
    """Factory fixture that creates finalized Phase instances."""
    return _make_phase
