"""speckit-status CLI: report progress on a Spec Kit tasks.md.

Installed as the ``speckit-status`` console_script.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from speckit_status import __version__
from speckit_status.config import NEXT_KINDS, Config
from speckit_status.io_utils import read_text
from speckit_status.tasks.model import ParseResult

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def resolve_spec_folder(cfg: Config, cwd: Path | None = None) -> Path:
    """Return the spec folder from ``--spec-folder`` or the current git branch.

    Exits with status 1 when no folder can be found.
    """
    from speckit_status import log
    from speckit_status.git_ops import spec_folder_from_branch

    if cfg.spec_folder:
        folder = Path(cfg.spec_folder)
    else:
        detected = spec_folder_from_branch(cwd=cwd, specs_dir=cfg.specs_dir)
        if detected is None:
            log.error(
                "Could not detect spec folder from git branch. "
                "Use -s/--spec-folder to specify manually."
            )
            sys.exit(1)
        folder = detected

    if not folder.exists():
        log.error(f"Spec folder does not exist: {folder}")
        sys.exit(1)
    return folder


def _print_next(result: ParseResult, kind: str) -> None:
    if kind == "task":
        click.echo(result.next_task.id if result.next_task else "done")
    else:
        click.echo(result.next_phase.number if result.next_phase else "done")


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("-s", "--spec-folder", default="", help="Spec folder (default: detect from git branch)")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("-a", "--all", "show_all", is_flag=True, help="Show all tasks, including completed")
@click.option("-p", "--phase", type=int, default=None, help="Show only this phase")
@click.option(
    "-n",
    "--next",
    "next_kind",
    is_flag=False,
    flag_value="phase",
    default=None,
    type=click.Choice(NEXT_KINDS),
    help="Print only the next phase number or task ID (phase|task, default: phase)",
)
@click.option("--specs-dir", default="", help="Directory holding spec folders (default: specs)")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="speckit-status")
def main(
    spec_folder: str,
    json_output: bool,
    show_all: bool,
    phase: int | None,
    next_kind: str | None,
    specs_dir: str,
    verbose: bool,
) -> None:
    """speckit-status - Track progress on Spec Kit tasks.

    Reads <spec-folder>/tasks.md, shows per-phase progress, and suggests
    which phases can be started now.

    \b
    EXAMPLES:
      speckit-status                      # Auto-detect from git branch
      speckit-status -s ./specs/my-spec   # Specify folder manually
      speckit-status -p 2                 # Show phase 2 details
      speckit-status -j                   # Output as JSON
      speckit-status -n                   # Get next phase number
      speckit-status -n task              # Get next task ID (e.g. T003)
    """
    from speckit_status import log
    from speckit_status.formatter import format_json, format_output
    from speckit_status.tasks.parser import parse_tasks_file

    log.set_verbose(verbose)

    cfg = Config(
        spec_folder=spec_folder,
        specs_dir=specs_dir,
        json_output=json_output,
        show_all=show_all,
        phase=phase,
        next_kind=next_kind or "",
        verbose=verbose,
    )

    folder = resolve_spec_folder(cfg)
    tasks_path = cfg.tasks_path(folder)
    if not tasks_path.is_file():
        log.error(f"Tasks file not found: {tasks_path}")
        sys.exit(1)

    log.debug(f"Reading {tasks_path}")
    result = parse_tasks_file(read_text(tasks_path), str(cfg.spec_folder or folder))

    if cfg.next_kind:
        _print_next(result, cfg.next_kind)
        return

    if cfg.json_output:
        click.echo(format_json(result))
    else:
        format_output(result, cfg)
