"""Wrapper around XMedCon's ``medcon`` converter.

``medcon -split3d`` writes one DICOM file per slice into its current
working directory, so the caller chooses the output folder through *cwd*.
"""

from __future__ import annotations

from pathlib import Path

from niftymatic.utils.errors import ConversionFailed
from niftymatic.utils.process import run_command

STAGE = "convert-nifti"


def build_cmd(volume: Path) -> list[str]:
    """Return the ``medcon`` arguments converting *volume* to DICOM slices."""
    return ["-f", str(volume), "-split3d", "-c", "dicom"]


def run_medcon(binary: str, volume: Path, out_dir: Path) -> None:
    """Split *volume* into per-slice DICOM files inside *out_dir*.

    Raises:
        CommandSpawnFailed: When *binary* cannot be started.
        ConversionFailed: When ``medcon`` exits with a non-zero status.
    """
    run_command(binary, build_cmd(volume), cwd=out_dir, stage=STAGE, error_cls=ConversionFailed)
