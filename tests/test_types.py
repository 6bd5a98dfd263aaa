import math
from pathlib import Path

import pytest
from pydantic import ValidationError

from niftymatic.pipelines.types import PathTranslation, PipelineStage, ReconstructionOptions
from niftymatic.utils.errors import ConfigurationInvalid, PathTranslationFailed


def test_default_options_serialise_in_order():
    """Verify the default flag/value list."""
    assert ReconstructionOptions().to_args() == [
        "--alpha", "0.01",
        "--outlier-rejection", "1",
        "--threshold-first", "0.5",
        "--threshold", "0.85",
        "--intensity-correction", "1",
        "--isotropic-resolution", "0.8",
        "--two-step-cycles", "3",
        "--verbose", "1",
    ]


def test_options_flags_and_whole_numbers():
    """Verify disabled flags serialise as 0 and whole floats lose the decimal."""
    args = ReconstructionOptions(
        alpha=1.0, outlier_rejection=False, intensity_correction=False, two_step_cycles=0
    ).to_args()
    pairs = dict(zip(args[::2], args[1::2]))
    assert pairs["--alpha"] == "1"
    assert pairs["--outlier-rejection"] == "0"
    assert pairs["--intensity-correction"] == "0"
    assert pairs["--two-step-cycles"] == "0"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"alpha": -0.1},
        {"threshold": 1.5},
        {"threshold_first": -0.01},
        {"isotropic_resolution": 0},
        {"two_step_cycles": -1},
        {"alpha": math.nan},
        {"alpha": math.inf},
        {"threshold": math.nan},
        {"isotropic_resolution": math.nan},
        {"two_step_cycles": 2.5},
        {"outlier_rejection": 5},
        {"intensity_correction": "yes"},
        {"unknown": 1},
    ],
)
def test_invalid_options_rejected(kwargs):
    """Verify out-of-range values raise ConfigurationInvalid."""
    with pytest.raises(ConfigurationInvalid):
        ReconstructionOptions(**kwargs)


def test_translation_round_trip_and_rejection():
    """Verify forward/backward mapping and loud failure on other roots."""
    tr = PathTranslation(source=Path("/work/job"), target=Path("/app/data"))
    assert tr.forward("/work/job/nii/a.nii") == Path("/app/data/nii/a.nii")
    assert tr.backward("/app/data/masks") == Path("/work/job/masks")
    assert tr.forward_all([Path("/work/job/a"), Path("/work/job/b")]) == ["/app/data/a", "/app/data/b"]
    with pytest.raises(PathTranslationFailed):
        tr.forward("/app/data/nii/a.nii")
    with pytest.raises(PathTranslationFailed):
        tr.backward("/work/job/nii/a.nii")


def test_translation_target_must_be_absolute():
    """Verify a relative target root is refused at construction."""
    with pytest.raises(ValidationError):
        PathTranslation(source=Path("/work/job"), target=Path("app/data"))


def test_stage_order_and_labels():
    """Verify stages compare by pipeline order."""
    assert PipelineStage.INITIALIZED < PipelineStage.DICOM_CONVERTED < PipelineStage.DICOM_REGENERATED
    assert PipelineStage.MASKS_GENERATED.label == "masks generated"


def test_options_are_immutable():
    """Verify options cannot change once validated."""
    opts = ReconstructionOptions()
    with pytest.raises(ValidationError):
        opts.alpha = float("nan")
