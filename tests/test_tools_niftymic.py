from pathlib import Path

import pytest

from niftymatic.pipelines.types import ReconstructionOptions
from niftymatic.tools.niftymic import (
    RECONSTRUCT_TOOL,
    SEGMENT_TOOL,
    ReconstructConfig,
    ReconstructVolumeTool,
    SegmentConfig,
    SegmentFetalBrainsTool,
)


def test_segment_spec():
    """Verify the segmentation arguments."""
    tool = SegmentFetalBrainsTool(
        SegmentConfig(filenames=["/app/data/nii/a.nii", "/app/data/nii/b.nii"], dir_output="/app/data/masks")
    )
    spec = tool.build_spec()
    assert spec.tool == SEGMENT_TOOL
    assert list(spec.args) == [
        "--filenames",
        "/app/data/nii/a.nii",
        "/app/data/nii/b.nii",
        "--dir-output",
        "/app/data/masks",
    ]


def test_segment_requires_output_dir():
    """Verify a missing output directory is rejected."""
    with pytest.raises(ValueError):
        SegmentFetalBrainsTool(SegmentConfig(filenames=["a"])).build_spec()


def test_reconstruct_spec_orders_arguments():
    """Verify volumes, masks, options and output appear in that order."""
    opts = ReconstructionOptions(alpha=0.02, two_step_cycles=1)
    spec = ReconstructVolumeTool(
        ReconstructConfig(
            filenames=["/m/nii/a.nii"],
            filenames_masks=["/m/masks/a.nii.gz"],
            output="/m/output_nii/job.nii.gz",
            options=opts,
        )
    ).build_spec()
    assert spec.tool == RECONSTRUCT_TOOL
    assert list(spec.args) == [
        "--filenames",
        "/m/nii/a.nii",
        "--filenames-masks",
        "/m/masks/a.nii.gz",
        *opts.to_args(),
        "--output",
        "/m/output_nii/job.nii.gz",
    ]


def test_reconstruct_passes_empty_lists_through():
    """Verify empty inputs are not rejected client-side."""
    spec = ReconstructVolumeTool(ReconstructConfig(output="/m/o.nii.gz")).build_spec()
    assert list(spec.args[:2]) == ["--filenames", "--filenames-masks"]
    assert list(spec.args[-2:]) == ["--output", "/m/o.nii.gz"]


def test_execute_uses_engine(engine):
    """Verify execute() forwards tool, args, host folder and stage."""
    SegmentFetalBrainsTool(SegmentConfig(filenames=[], dir_output="/app/data/masks")).execute(engine, "/host")
    assert engine.calls == [
        {
            "tool": SEGMENT_TOOL,
            "args": ["--filenames", "--dir-output", "/app/data/masks"],
            "host": Path("/host"),
            "stage": "generate-masks",
        }
    ]
