"""
Typed value objects that circulate between pipeline stages.

The module depends only on the Python standard library and *pydantic* so it
can be imported early by the CLI and by tests that never touch Docker.
"""

from __future__ import annotations

import os
from enum import IntEnum
from pathlib import Path
from typing import List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    field_validator,
)

from niftymatic.utils.errors import ConfigurationInvalid, PathTranslationFailed


def _lexical(path: str | Path) -> Path:
    """Return *path* made absolute with ``.``/``..`` collapsed, symlinks kept."""
    return Path(os.path.normpath(os.path.abspath(path)))


def _reroot(path: str | Path, old: Path, new: Path) -> Path:
    """Return *path* with its *old* prefix replaced by *new*."""
    candidate = Path(os.path.normpath(path))
    if not candidate.is_absolute():
        raise PathTranslationFailed(path, old)
    try:
        suffix = candidate.relative_to(old)
    except ValueError as exc:
        raise PathTranslationFailed(path, old) from exc
    return new / suffix


class PipelineStage(IntEnum):
    """Progress of a working directory through the four pipeline stages.

    Members are ordered, so ``stage >= PipelineStage.MASKS_GENERATED`` reads
    as "masks are available".
    """

    INITIALIZED = 0
    DICOM_CONVERTED = 1
    MASKS_GENERATED = 2
    RECONSTRUCTED = 3
    DICOM_REGENERATED = 4

    @property
    def label(self) -> str:
        """Human-readable name, e.g. ``"masks generated"``."""
        return self.name.lower().replace("_", " ")


class PathTranslation(BaseModel, frozen=True):
    """Prefix substitution between two directory roots.

    Attributes
    ----------
    source
        Root on one side, typically the host working directory.
    target
        Equivalent root on the other side, typically the container mount.

    Only true descendants of the expected root are translated. Anything else
    raises :class:`~niftymatic.utils.errors.PathTranslationFailed` instead of
    producing a plausible but wrong path.
    """

    source: Path
    target: Path

    @field_validator("source")
    @classmethod
    def _normalise_source(cls, value: Path) -> Path:
        return _lexical(value)

    @field_validator("target")
    @classmethod
    def _target_is_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"translation target must be absolute, got {value}")
        return Path(os.path.normpath(value))

    def forward(self, path: str | Path) -> Path:
        """Map a descendant of :attr:`source` under :attr:`target`."""
        return _reroot(path, self.source, self.target)

    def backward(self, path: str | Path) -> Path:
        """Map a descendant of :attr:`target` back under :attr:`source`."""
        return _reroot(path, self.target, self.source)

    def forward_all(self, paths: List[Path]) -> List[str]:
        """Translate every path in *paths*, preserving order."""
        return [str(self.forward(p)) for p in paths]


def _fmt(value: float) -> str:
    """Format a float the way the NiftyMIC command line expects (``0.01``)."""
    return f"{value:g}"


class ReconstructionOptions(BaseModel):
    """Settings for ``niftymic_reconstruct_volume``.

    Defaults mirror the values used for fetal brain reconstructions so the
    behaviour is unchanged when no option is given. Values are checked on
    construction; NaN, infinities, non-integer cycle counts and non-boolean
    flags raise :class:`~niftymatic.utils.errors.ConfigurationInvalid`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    alpha: float = Field(0.01, ge=0, allow_inf_nan=False)
    outlier_rejection: StrictBool = True
    threshold_first: float = Field(0.5, ge=0, le=1, allow_inf_nan=False)
    threshold: float = Field(0.85, ge=0, le=1, allow_inf_nan=False)
    intensity_correction: StrictBool = True
    isotropic_resolution: float = Field(0.8, gt=0, allow_inf_nan=False)
    two_step_cycles: StrictInt = Field(3, ge=0)

    def __init__(self, **data) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationInvalid(f"Invalid reconstruction options – {exc}") from exc

    def to_args(self) -> list[str]:
        """Serialise to the ordered flag/value list passed to the tool."""
        return [
            "--alpha", _fmt(self.alpha),
            "--outlier-rejection", str(int(self.outlier_rejection)),
            "--threshold-first", _fmt(self.threshold_first),
            "--threshold", _fmt(self.threshold),
            "--intensity-correction", str(int(self.intensity_correction)),
            "--isotropic-resolution", _fmt(self.isotropic_resolution),
            "--two-step-cycles", str(self.two_step_cycles),
            "--verbose", "1",
        ]


__all__ = ["PipelineStage", "PathTranslation", "ReconstructionOptions"]
