"""``pipeline`` command: run all four stages on a new archive."""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from niftymatic.pipelines.reconstruct import Reconstruction
from niftymatic.pipelines.types import ReconstructionOptions
from niftymatic.utils.display import echo_banner, echo_stage, echo_success

from ._shared import pipeline_errors, reconstruction_options

log = structlog.get_logger()


@click.command(name="pipeline", help="Run the full DICOM → reconstruction → DICOM pipeline on ARCHIVE.")
@click.argument("archive", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@reconstruction_options
@click.pass_obj
def cli(ctx_obj, archive: Path, options: ReconstructionOptions) -> None:  # noqa: D401
    """Entry-point for ``niftymatic-cli pipeline``."""
    echo_banner("Reconstruction pipeline")
    with pipeline_errors():
        rec = Reconstruction.from_archive(archive, ctx_obj["cfg"])
        echo_stage(f"working directory {rec.workdir.path}")
        echo_stage("DICOM → NIfTI")
        rec.convert_dicom_to_nifti()
        echo_stage("generate masks")
        rec.generate_masks()
        echo_stage("reconstruct volume")
        rec.reconstruct(options)
        echo_stage("NIfTI → DICOM")
        result = rec.convert_nifti_to_dicom()
    log.info("pipeline.result", archive=str(result))
    echo_success(f"Result: {result}")
