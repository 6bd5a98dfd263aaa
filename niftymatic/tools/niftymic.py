"""Tool wrappers for the NiftyMIC container.

Both wrappers receive paths that are already expressed inside the
container mount. They never translate paths themselves: the bind mount is
the only bridge to the host, and an untranslated host path would only
surface as a *file not found* from inside the container.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from niftymatic.pipelines.types import ReconstructionOptions

from .base import Tool, ToolSpec

SEGMENT_TOOL = "niftymic_segment_fetal_brains"
RECONSTRUCT_TOOL = "niftymic_reconstruct_volume"


@dataclass
class SegmentConfig:
    """Inputs of ``niftymic_segment_fetal_brains``."""

    filenames: Sequence[str] = field(default_factory=list)
    dir_output: str = ""


class SegmentFetalBrainsTool(Tool):
    """Generate one brain mask per input volume."""

    stage = "generate-masks"

    def __init__(self, cfg: SegmentConfig):
        self.cfg = cfg

    def build_spec(self) -> ToolSpec:  # type: ignore[override]
        """Return ``--filenames <volumes…> --dir-output <dir>``."""
        if not self.cfg.dir_output:
            raise ValueError("dir_output must be specified")
        args = ["--filenames", *self.cfg.filenames, "--dir-output", self.cfg.dir_output]
        return ToolSpec(SEGMENT_TOOL, args)


@dataclass
class ReconstructConfig:
    """Inputs of ``niftymic_reconstruct_volume``.

    ``filenames`` and ``filenames_masks`` are paired by position.
    """

    filenames: Sequence[str] = field(default_factory=list)
    filenames_masks: Sequence[str] = field(default_factory=list)
    output: str = ""
    options: ReconstructionOptions = field(default_factory=ReconstructionOptions)


class ReconstructVolumeTool(Tool):
    """Reconstruct a single isotropic volume from stacks and masks."""

    stage = "reconstruct"

    def __init__(self, cfg: ReconstructConfig):
        self.cfg = cfg

    def build_spec(self) -> ToolSpec:  # type: ignore[override]
        """Return the argument vector for the reconstruction.

        Empty volume or mask lists are passed through unchanged; only the
        tool itself may reject them.
        """
        if not self.cfg.output:
            raise ValueError("output must be specified")
        args = [
            "--filenames",
            *self.cfg.filenames,
            "--filenames-masks",
            *self.cfg.filenames_masks,
            *self.cfg.options.to_args(),
            "--output",
            self.cfg.output,
        ]
        return ToolSpec(RECONSTRUCT_TOOL, args)
