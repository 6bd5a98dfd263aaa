"""``status`` command: report how far a working directory has progressed."""

from __future__ import annotations

from pathlib import Path

import click

from niftymatic.pipelines.types import PipelineStage
from niftymatic.pipelines.workdir import WorkingDirectory

from ._shared import workdir_argument


@click.command(name="status", help="Show the furthest completed stage of WORKING_DIRECTORY.")
@workdir_argument
def cli(working_directory: Path) -> None:  # noqa: D401
    """Entry-point for ``niftymatic-cli status``."""
    workdir = WorkingDirectory.open_existing(working_directory)
    stage = workdir.infer_stage()
    click.echo(f"{workdir.name}: {stage.label}")
    for member in PipelineStage:
        mark = "x" if member <= stage else " "
        click.echo(f"  [{mark}] {member.label}")
