"""Wrapper around the *dcm2niix* command-line tool.

The helper converts every DICOM series found below a source directory into
uncompressed ``.nii`` volumes. Compression is switched off explicitly so
the downstream search for ``*.nii`` files sees every converted volume,
whatever default the installed *dcm2niix* build uses.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import structlog

from niftymatic.utils.errors import ConversionFailed
from niftymatic.utils.process import run_command

log = structlog.get_logger()

STAGE = "convert-dicom"


def build_cmd(src: Path, dst: Path, *, extra_flags: Sequence[str] | None = None) -> list[str]:
    """Return the *dcm2niix* arguments (without the binary).

    The source directory is always the final token.
    """
    args = ["-z", "n", "-o", str(dst)]
    if extra_flags:
        args.extend(extra_flags)
    args.append(str(src))
    return args


def run_dcm2niix(
    binary: str,
    src: Path,
    dst: Path,
    *,
    extra_flags: Sequence[str] | None = None,
) -> None:
    """Convert the DICOM tree at *src* into NIfTI files inside *dst*.

    Args:
        binary: *dcm2niix* executable from the configuration.
        src: Directory holding the extracted DICOM files.
        dst: Existing output directory.
        extra_flags: Additional flags inserted before the source directory.

    Raises:
        CommandSpawnFailed: When *binary* cannot be started.
        ConversionFailed: When *dcm2niix* exits with a non-zero status.
    """
    args = build_cmd(src, dst, extra_flags=extra_flags)
    log.debug("dcm2niix.cmd", cmd=" ".join([binary, *args]))
    run_command(binary, args, stage=STAGE, error_cls=ConversionFailed)
