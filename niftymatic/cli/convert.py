"""
``convert-dicom`` and ``convert-nifti`` commands.

* ``convert-dicom ARCHIVE`` creates a new working directory from a zip of
  DICOM files and converts it to NIfTI with *dcm2niix*.
* ``convert-nifti WORKDIR`` turns the reconstructed volume back into DICOM
  slices and packages them as ``<WORKDIR>/<name>.zip``.
"""

from __future__ import annotations

from pathlib import Path

import click

from niftymatic.pipelines.reconstruct import Reconstruction
from niftymatic.pipelines.types import PipelineStage
from niftymatic.utils.display import echo_banner, echo_stage, echo_success

from ._shared import force_option, open_reconstruction, pipeline_errors, workdir_argument


@click.command(name="convert-dicom", help="Create a working directory from ARCHIVE and convert it to NIfTI.")
@click.argument("archive", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.pass_obj
def convert_dicom(ctx_obj, archive: Path) -> None:  # noqa: D401 – Click callback
    """Entry-point for ``niftymatic-cli convert-dicom``."""
    echo_banner("DICOM → NIfTI")
    with pipeline_errors():
        rec = Reconstruction.from_archive(archive, ctx_obj["cfg"])
        echo_stage(f"working directory {rec.workdir.path}")
        rec.convert_dicom_to_nifti()
    echo_success(f"{len(rec.workdir.nifti_images())} volume(s) in {rec.workdir.nii}")


@click.command(name="convert-nifti", help="Convert the reconstructed volume in WORKING_DIRECTORY to a DICOM archive.")
@workdir_argument
@force_option
@click.pass_obj
def convert_nifti(ctx_obj, working_directory: Path, force: bool) -> None:  # noqa: D401
    """Entry-point for ``niftymatic-cli convert-nifti``."""
    echo_banner("NIfTI → DICOM")
    with pipeline_errors():
        rec = open_reconstruction(
            ctx_obj, working_directory, requires=PipelineStage.RECONSTRUCTED, force=force
        )
        result = rec.convert_nifti_to_dicom()
    echo_success(f"Result: {result}")
