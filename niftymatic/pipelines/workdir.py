"""
Per-job working directory with a fixed, resumable layout.

Every reconstruction job owns one directory below the configured base
directory::

    <stem>-<unique id>/
        archive/        extracted input archive (DICOM)
        nii/            NIfTI volumes converted from the archive
        masks/          brain masks, one per NIfTI volume
        output_nii/     <stem>-<unique id>.nii.gz
        output_dicom/   per-slice DICOM regenerated from the volume
        <stem>-<unique id>.zip

The layout is a contract: any stage can be re-run standalone against a
directory of this shape, so subdirectory names and derived filenames must
not change.
"""

from __future__ import annotations

import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import structlog

from niftymatic.utils import archive as archive_io
from niftymatic.utils.errors import DirectoryCreationFailed

from .types import PathTranslation, PipelineStage

log = structlog.get_logger()

ARCHIVE_DIR = "archive"
NIFTI_DIR = "nii"
MASKS_DIR = "masks"
NIFTI_OUTPUT_DIR = "output_nii"
DICOM_OUTPUT_DIR = "output_dicom"

SUBDIRECTORIES: tuple[str, ...] = (
    ARCHIVE_DIR,
    NIFTI_DIR,
    MASKS_DIR,
    NIFTI_OUTPUT_DIR,
    DICOM_OUTPUT_DIR,
)

NIFTI_EXTENSION = "nii"
MASK_EXTENSION = "gz"


def unique_id() -> str:
    """Return a time-ordered, collision-resistant identifier.

    The UTC timestamp (microsecond resolution) keeps names sortable by
    creation time; the random suffix separates jobs started in the same
    microsecond.
    """
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
    return f"{stamp}-{uuid.uuid4().hex[:12]}"


def directory_name_for(archive_path: str | Path) -> str:
    """Return ``<archive stem>-<unique id>`` for *archive_path*.

    Colons in the stem become underscores; the name ends up in the
    ``host:mount`` volume argument of ``docker run``.
    """
    stem = Path(archive_path).stem.replace(":", "_")
    return f"{stem}-{unique_id()}"


def search_by_extension(directory: str | Path, extension: str) -> List[Path]:
    """Return files below *directory* whose last suffix is *extension*.

    The search is recursive and the result is sorted lexicographically. Two
    searches over folders holding the same base filenames therefore line up
    index by index, which is how NIfTI volumes are paired with their masks.

    Args:
        directory: Folder to scan. A missing folder yields an empty list.
        extension: Suffix without the dot (``"nii"``, ``"gz"``). Only the
            final suffix is compared, so ``"gz"`` matches ``*.nii.gz``.

    Returns:
        Sorted absolute paths.
    """
    directory = Path(directory)
    wanted = "." + extension.lstrip(".")
    if not directory.is_dir():
        return []
    files = sorted(
        Path(os.path.abspath(p))
        for p in directory.rglob("*")
        if p.is_file() and p.suffix == wanted
    )
    for f in files:
        log.debug("workdir.found", file=str(f), directory=str(directory))
    return files


def clear(directory: str | Path) -> None:
    """Delete every file below *directory*, keeping the folder structure.

    Calling this on an empty or already-cleared directory does nothing.
    """
    directory = Path(directory)
    removed = 0
    for path in sorted(directory.rglob("*")):
        if path.is_file() or path.is_symlink():
            path.unlink()
            removed += 1
    log.debug("workdir.cleared", directory=str(directory), removed=removed)


class WorkingDirectory:
    """Handle on one job directory.

    Use :meth:`create_from_archive` to start a new job or
    :meth:`open_existing` to attach to a directory prepared earlier.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(os.path.normpath(os.path.abspath(path)))
        self.name = self.path.name

    def __repr__(self) -> str:
        return f"WorkingDirectory({str(self.path)!r})"

    # ------------------------------------------------------------------ #
    # Construction                                                       #
    # ------------------------------------------------------------------ #
    @classmethod
    def open_existing(cls, path: str | Path) -> "WorkingDirectory":
        """Attach to *path* without checking its contents."""
        log.debug("workdir.open", path=str(path))
        return cls(path)

    @classmethod
    def create_from_archive(
        cls,
        archive_path: str | Path,
        base_directory: str | Path,
    ) -> "WorkingDirectory":
        """Create a fresh working directory and extract *archive_path* into it.

        Args:
            archive_path: Input study archive (``.zip``).
            base_directory: Existing parent folder for the new directory.

        Returns:
            The new :class:`WorkingDirectory`.

        Raises:
            DirectoryCreationFailed: When the directory or one of its
                subdirectories cannot be created.
            ArchiveInvalid: When the archive cannot be extracted.
        """
        log.debug("workdir.create", archive=str(archive_path), base=str(base_directory))
        workdir = cls(Path(base_directory) / directory_name_for(archive_path))
        try:
            workdir.path.mkdir()
            for sub in SUBDIRECTORIES:
                (workdir.path / sub).mkdir()
        except OSError as exc:
            raise DirectoryCreationFailed(f"{workdir.path} {exc}") from exc

        archive_io.extract(archive_path, workdir.archive)
        log.info("workdir.created", path=str(workdir.path))
        return workdir

    # ------------------------------------------------------------------ #
    # Layout                                                             #
    # ------------------------------------------------------------------ #
    @property
    def archive(self) -> Path:
        return self.path / ARCHIVE_DIR

    @property
    def nii(self) -> Path:
        return self.path / NIFTI_DIR

    @property
    def masks(self) -> Path:
        return self.path / MASKS_DIR

    @property
    def output_nii(self) -> Path:
        return self.path / NIFTI_OUTPUT_DIR

    @property
    def output_dicom(self) -> Path:
        return self.path / DICOM_OUTPUT_DIR

    @property
    def nifti_filename(self) -> str:
        return f"{self.name}.nii.gz"

    @property
    def dicom_filename(self) -> str:
        return f"{self.name}.zip"

    @property
    def nifti_output(self) -> Path:
        """Reconstructed volume written by the reconstruction stage."""
        return self.output_nii / self.nifti_filename

    @property
    def dicom_archive(self) -> Path:
        """Final packaged DICOM output."""
        return self.path / self.dicom_filename

    # ------------------------------------------------------------------ #
    # Searches and translation                                           #
    # ------------------------------------------------------------------ #
    def nifti_images(self) -> List[Path]:
        """Sorted NIfTI volumes produced by the DICOM conversion."""
        return search_by_extension(self.nii, NIFTI_EXTENSION)

    def mask_images(self) -> List[Path]:
        """Sorted masks produced by the segmentation stage."""
        return search_by_extension(self.masks, MASK_EXTENSION)

    def translation(self, target_root: str | Path) -> PathTranslation:
        """Return the mapping from this directory onto *target_root*."""
        return PathTranslation(source=self.path, target=Path(target_root))

    def translate(self, path: str | Path, target_root: str | Path) -> Path:
        """Re-root *path* from this directory under *target_root*.

        Raises:
            PathTranslationFailed: When *path* is not inside this directory.
        """
        return self.translation(target_root).forward(path)

    def clear(self, directory: str | Path) -> None:
        """Remove all files below *directory*; see :func:`clear`."""
        clear(directory)

    def clear_output_dicom(self) -> None:
        clear(self.output_dicom)

    # ------------------------------------------------------------------ #
    # Stage inference                                                    #
    # ------------------------------------------------------------------ #
    def infer_stage(self) -> PipelineStage:
        """Return the furthest stage whose output exists on disk."""
        if self.dicom_archive.is_file():
            return PipelineStage.DICOM_REGENERATED
        if self.nifti_output.is_file():
            return PipelineStage.RECONSTRUCTED
        if self.mask_images():
            return PipelineStage.MASKS_GENERATED
        if self.nifti_images():
            return PipelineStage.DICOM_CONVERTED
        return PipelineStage.INITIALIZED


__all__ = [
    "SUBDIRECTORIES",
    "WorkingDirectory",
    "clear",
    "directory_name_for",
    "search_by_extension",
    "unique_id",
]
