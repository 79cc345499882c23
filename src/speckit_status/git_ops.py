"""Git helpers: locate the spec folder for the current branch."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

from speckit_status import log

# "001-portfolio-website" inside e.g. "feature/001-portfolio-website"
SPEC_ID_RE = re.compile(r"([0-9]{3}-[a-z0-9-]+)")


def _git(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run a git command, suppressing stderr noise."""
    return subprocess.run(
        ["git", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        check=False,
    )


def current_branch(cwd: Path | None = None) -> str | None:
    """Return the checked-out branch name, or ``None`` outside a git repo."""
    try:
        r = _git("rev-parse", "--abbrev-ref", "HEAD", cwd=cwd)
    except (FileNotFoundError, NotADirectoryError) as exc:
        log.debug(f"git unavailable: {exc}")
        return None
    if r.returncode != 0:
        return None
    return r.stdout.strip()


def spec_folder_from_branch(cwd: Path | None = None, specs_dir: str = "specs") -> Path | None:
    """Map the current branch to ``<cwd>/<specs_dir>/<spec-id>``.

    Tries the branch name itself first, then the first ``NNN-slug`` found in
    it (so ``feature/001-portfolio-website`` resolves to ``001-portfolio-website``).
    """
    root = cwd if cwd is not None else Path.cwd()
    branch = current_branch(cwd=root)
    if not branch:
        return None

    direct = root / specs_dir / branch
    if direct.exists():
        return direct

    m = SPEC_ID_RE.search(branch)
    if m:
        candidate = root / specs_dir / m.group(1)
        if candidate.exists():
            return candidate

    log.debug(f"No spec folder under {root / specs_dir} for branch {branch!r}")
    return None


def spec_name_of(path: str) -> str:
    """Last segment of *path*, splitting on both ``/`` and ``\\``."""
    return re.split(r"[/\\]", path)[-1]
