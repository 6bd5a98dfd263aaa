"""
Four-stage fetal brain reconstruction on one working directory.

Stages, in order::

    convert_dicom_to_nifti   host      dcm2niix   archive/   → nii/
    generate_masks           container segment    nii/       → masks/
    reconstruct              container reconstruct nii/+masks/ → output_nii/
    convert_nifti_to_dicom   host      medcon     output_nii/ → output_dicom/ + zip

:class:`Reconstruction` does not remember which stages ran. Any stage can be
called against a directory prepared earlier, and re-running a stage only
overwrites that stage's own output. The furthest completed stage can be
queried through :attr:`Reconstruction.stage`, which inspects the directory.

Errors propagate unchanged; nothing here retries or cleans up after a
failure.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog

from niftymatic.config.schema import ConfigSchema
from niftymatic.engines import DockerEngine, ExecutionEngine
from niftymatic.io import run_dcm2niix, run_medcon
from niftymatic.tools import (
    ReconstructConfig,
    ReconstructVolumeTool,
    SegmentConfig,
    SegmentFetalBrainsTool,
)
from niftymatic.utils import archive as archive_io
from niftymatic.utils.errors import StagePreconditionFailed

from .types import PipelineStage, ReconstructionOptions
from .workdir import WorkingDirectory

log = structlog.get_logger()


class Reconstruction:
    """Run pipeline stages against a single :class:`WorkingDirectory`.

    Args:
        workdir: Directory holding every stage's inputs and outputs.
        cfg: Validated configuration, read only.
        engine: Container engine. Built from *cfg* when omitted.
    """

    def __init__(
        self,
        workdir: WorkingDirectory,
        cfg: ConfigSchema,
        engine: Optional[ExecutionEngine] = None,
    ) -> None:
        self.workdir = workdir
        self.cfg = cfg
        self.engine = engine or DockerEngine.from_config(cfg)

    # ------------------------------------------------------------------ #
    # Constructors                                                       #
    # ------------------------------------------------------------------ #
    @classmethod
    def from_archive(
        cls,
        archive_path: str | Path,
        cfg: ConfigSchema,
        engine: Optional[ExecutionEngine] = None,
    ) -> "Reconstruction":
        """Create a new working directory from *archive_path*."""
        workdir = WorkingDirectory.create_from_archive(archive_path, cfg.output.base_directory)
        return cls(workdir, cfg, engine)

    @classmethod
    def from_working_directory(
        cls,
        path: str | Path,
        cfg: ConfigSchema,
        engine: Optional[ExecutionEngine] = None,
    ) -> "Reconstruction":
        """Attach to an existing working directory to resume a stage."""
        return cls(WorkingDirectory.open_existing(path), cfg, engine)

    # ------------------------------------------------------------------ #
    # Stage queries                                                      #
    # ------------------------------------------------------------------ #
    @property
    def stage(self) -> PipelineStage:
        """Furthest stage whose output is present in the working directory."""
        return self.workdir.infer_stage()

    def require_stage(self, minimum: PipelineStage) -> None:
        """Raise unless the working directory has reached *minimum*.

        Raises:
            StagePreconditionFailed: When the inferred stage is lower.
        """
        current = self.stage
        if current < minimum:
            raise StagePreconditionFailed(
                f"{self.workdir.path} is at stage '{current.label}', "
                f"'{minimum.label}' is required"
            )

    def _container(self, path: Path) -> str:
        return str(self.workdir.translate(path, self.engine.mount_path))

    # ------------------------------------------------------------------ #
    # Stages                                                             #
    # ------------------------------------------------------------------ #
    def convert_dicom_to_nifti(self) -> None:
        """Convert the extracted archive into NIfTI volumes on the host."""
        log.info("stage.convert_dicom.start", workdir=str(self.workdir.path))
        run_dcm2niix(self.cfg.executables.dcm2niix, self.workdir.archive, self.workdir.nii)
        log.info("stage.convert_dicom.done")

    def generate_masks(self) -> None:
        """Segment every NIfTI volume inside the container."""
        translation = self.workdir.translation(self.engine.mount_path)
        tool = SegmentFetalBrainsTool(
            SegmentConfig(
                filenames=translation.forward_all(self.workdir.nifti_images()),
                dir_output=self._container(self.workdir.masks),
            )
        )
        log.info("stage.generate_masks.start", workdir=str(self.workdir.path))
        tool.execute(self.engine, self.workdir.path)
        log.info("stage.generate_masks.done")

    def reconstruct(self, options: Optional[ReconstructionOptions] = None) -> None:
        """Reconstruct the isotropic volume inside the container.

        Volumes and masks are paired by index. Both lists come from the same
        sorted search, so the pairing holds as long as each mask keeps the
        base filename of its volume.
        """
        translation = self.workdir.translation(self.engine.mount_path)
        tool = ReconstructVolumeTool(
            ReconstructConfig(
                filenames=translation.forward_all(self.workdir.nifti_images()),
                filenames_masks=translation.forward_all(self.workdir.mask_images()),
                output=self._container(self.workdir.nifti_output),
                options=options or ReconstructionOptions(),
            )
        )
        log.info("stage.reconstruct.start", workdir=str(self.workdir.path))
        tool.execute(self.engine, self.workdir.path)
        log.info("stage.reconstruct.done", output=str(self.workdir.nifti_output))

    def convert_nifti_to_dicom(self) -> Path:
        """Regenerate DICOM slices and package them.

        Returns:
            Absolute path of ``<workdir>/<name>.zip``.
        """
        log.info("stage.convert_nifti.start", workdir=str(self.workdir.path))
        self.workdir.clear_output_dicom()
        run_medcon(
            self.cfg.executables.medcon,
            self.workdir.nifti_output,
            self.workdir.output_dicom,
        )
        log.info("stage.convert_nifti.archive", archive=self.workdir.dicom_filename)
        archive_io.create(
            self.workdir.output_dicom,
            self.workdir.dicom_archive,
            archive_io.suffix_filter("dcm"),
        )
        log.info("stage.convert_nifti.done", archive=str(self.workdir.dicom_archive))
        return self.workdir.dicom_archive

    def run_all(self, options: Optional[ReconstructionOptions] = None) -> Path:
        """Run every stage in order and return the final archive path."""
        self.convert_dicom_to_nifti()
        self.generate_masks()
        self.reconstruct(options)
        return self.convert_nifti_to_dicom()


__all__ = ["Reconstruction"]
