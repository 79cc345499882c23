"""CLI tests: every flag parses and produces the expected report."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from speckit_status import git_ops
from speckit_status.cli import main


def _run_cli(args: list[str], cwd: Path | None = None, timeout: int = 30) -> subprocess.CompletedProcess:
    """Run speckit-status as a subprocess. Use when cwd matters."""
    cmd = [sys.executable, "-m", "speckit_status"] + args
    return subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
    )


@pytest.fixture
def cli_runner():
    """Click CliRunner for invoking the CLI in-process."""
    from click.testing import CliRunner
    return CliRunner()


# ── Main entry and help ────────────────────────────────────────────────


class TestCliHelpAndVersion:
    def test_help_long(self, cli_runner):
        r = cli_runner.invoke(main, ["--help"])
        assert r.exit_code == 0
        assert "speckit-status" in r.output
        assert "--spec-folder" in r.output

    def test_help_short(self, cli_runner):
        r = cli_runner.invoke(main, ["-h"])
        assert r.exit_code == 0

    def test_version(self, cli_runner):
        r = cli_runner.invoke(main, ["--version"])
        assert r.exit_code == 0
        assert "speckit-status" in r.output


# ── Report output ──────────────────────────────────────────────────────


class TestCliReport:
    def test_summary(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder)])
        assert r.exit_code == 0, r.output
        assert "001-portfolio-website" in r.output
        assert "Next Phase" in r.output

    def test_phase_detail(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder), "-p", "3"])
        assert r.exit_code == 0
        assert "T005" in r.output
        assert "Next Phase" not in r.output

    def test_phase_detail_all(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder), "--phase", "1", "--all"])
        assert r.exit_code == 0
        assert "T001" in r.output

    def test_phase_must_be_int(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder), "-p", "two"])
        assert r.exit_code == 2

    def test_json(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder), "--json"])
        assert r.exit_code == 0
        data = json.loads(r.output)
        assert data["specName"] == "001-portfolio-website"
        assert data["specFolder"] == str(spec_folder)
        assert data["totalTasks"] == 7
        assert [p["number"] for p in data["availablePhases"]] == [2, 3]


# ── --next ─────────────────────────────────────────────────────────────


class TestCliNext:
    def test_bare_next_is_phase(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder), "-n"])
        assert r.exit_code == 0
        assert r.output.strip() == "2"

    def test_next_phase_explicit(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder), "--next", "phase"])
        assert r.output.strip() == "2"

    def test_next_task(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder), "-n", "task"])
        assert r.exit_code == 0
        assert r.output.strip() == "T004"

    def test_next_before_other_flag(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-n", "-s", str(spec_folder)])
        assert r.exit_code == 0
        assert r.output.strip() == "2"

    def test_next_done(self, cli_runner, tmp_path, write_file):
        folder = tmp_path / "done"
        write_file(folder / "tasks.md", "## Phase 1: Only\n- [X] T001 Done\n")
        assert cli_runner.invoke(main, ["-s", str(folder), "-n"]).output.strip() == "done"
        assert cli_runner.invoke(main, ["-s", str(folder), "-n", "task"]).output.strip() == "done"

    def test_next_invalid_kind(self, cli_runner, spec_folder):
        r = cli_runner.invoke(main, ["-s", str(spec_folder), "-n", "milestone"])
        assert r.exit_code == 2


# ── Errors ─────────────────────────────────────────────────────────────


class TestCliErrors:
    def test_missing_folder(self, cli_runner, tmp_path):
        r = cli_runner.invoke(main, ["-s", str(tmp_path / "nope")])
        assert r.exit_code == 1

    def test_missing_tasks_file(self, cli_runner, tmp_path):
        r = cli_runner.invoke(main, ["-s", str(tmp_path)])
        assert r.exit_code == 1

    def test_branch_detection_failure(self, cli_runner, monkeypatch):
        monkeypatch.setattr(git_ops, "spec_folder_from_branch", lambda cwd=None, specs_dir="specs": None)
        r = cli_runner.invoke(main, [])
        assert r.exit_code == 1

    def test_branch_detection_success(self, cli_runner, monkeypatch, spec_folder):
        monkeypatch.setattr(git_ops, "spec_folder_from_branch", lambda cwd=None, specs_dir="specs": spec_folder)
        r = cli_runner.invoke(main, ["-n", "task"])
        assert r.exit_code == 0
        assert r.output.strip() == "T004"


# ── Subprocess ─────────────────────────────────────────────────────────


class TestCliSubprocess:
    def test_module_entry_detects_branch(self, git_repo, sample_tasks_md, write_file):
        subprocess.run(
            ["git", "checkout", "-b", "feature/001-portfolio-website"],
            cwd=git_repo, capture_output=True, check=True,
        )
        write_file(git_repo / "specs" / "001-portfolio-website" / "tasks.md", sample_tasks_md)

        r = _run_cli(["--next", "task"], cwd=git_repo)
        assert r.returncode == 0, r.stderr
        assert r.stdout.strip() == "T004"
