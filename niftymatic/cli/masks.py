"""``generate-masks`` command: segment every NIfTI volume in a working directory."""

from __future__ import annotations

from pathlib import Path

import click

from niftymatic.pipelines.types import PipelineStage
from niftymatic.utils.display import echo_banner, echo_success

from ._shared import force_option, open_reconstruction, pipeline_errors, workdir_argument


@click.command(name="generate-masks", help="Generate brain masks for the volumes in WORKING_DIRECTORY.")
@workdir_argument
@force_option
@click.pass_obj
def cli(ctx_obj, working_directory: Path, force: bool) -> None:  # noqa: D401
    """Entry-point for ``niftymatic-cli generate-masks``."""
    echo_banner("Generate masks")
    with pipeline_errors():
        rec = open_reconstruction(
            ctx_obj, working_directory, requires=PipelineStage.DICOM_CONVERTED, force=force
        )
        rec.generate_masks()
    echo_success(f"{len(rec.workdir.mask_images())} mask(s) in {rec.workdir.masks}")
