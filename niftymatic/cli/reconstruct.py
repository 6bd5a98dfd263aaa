"""``reconstruct`` command: run the super-resolution reconstruction."""

from __future__ import annotations

from pathlib import Path

import click

from niftymatic.pipelines.types import PipelineStage, ReconstructionOptions
from niftymatic.utils.display import echo_banner, echo_success

from ._shared import (
    force_option,
    open_reconstruction,
    pipeline_errors,
    reconstruction_options,
    workdir_argument,
)


@click.command(name="reconstruct", help="Reconstruct the volume from the stacks and masks in WORKING_DIRECTORY.")
@workdir_argument
@force_option
@reconstruction_options
@click.pass_obj
def cli(ctx_obj, working_directory: Path, force: bool, options: ReconstructionOptions) -> None:  # noqa: D401
    """Entry-point for ``niftymatic-cli reconstruct``."""
    echo_banner("Reconstruct volume")
    with pipeline_errors():
        rec = open_reconstruction(
            ctx_obj, working_directory, requires=PipelineStage.MASKS_GENERATED, force=force
        )
        rec.reconstruct(options)
    echo_success(f"Volume written to {rec.workdir.nifti_output}")
