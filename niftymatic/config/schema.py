"""
Pydantic models that mirror the YAML configuration consumed by *niftymatic*.

The configuration is read once at start-up and then handed to every
component constructor. All models are frozen so no stage can mutate the
shared settings while a job runs.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --------------------------------------------------------------------------- #
# 1.  Section models                                                          #
# --------------------------------------------------------------------------- #


class OutputSection(BaseModel):
    """Where working directories are created.

    Attributes:
        base_directory: Parent folder for every per-job working directory.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_directory: str = Field(..., min_length=1)


class ExecutablesSection(BaseModel):
    """Host-native executables invoked by the pipeline.

    Attributes:
        dcm2niix: DICOM → NIfTI converter.
        docker: Container engine used for the NiftyMIC tools.
        medcon: NIfTI → DICOM converter (XMedCon).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dcm2niix: str = Field(..., min_length=1)
    docker: str = Field(..., min_length=1)
    medcon: str = Field(..., min_length=1)


class DockerSection(BaseModel):
    """Container image and the in-container mount point.

    Attributes:
        image: Image reference such as ``renbem/niftymic``.
        working_directory: Absolute path inside the container where the
            host working directory is bind-mounted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    image: str = Field(..., min_length=1)
    working_directory: str = Field(..., min_length=1)

    @field_validator("working_directory")
    @classmethod
    def _mount_is_absolute(cls, value: str) -> str:
        """Container mount points must be absolute POSIX paths."""
        if not PurePosixPath(value).is_absolute():
            raise ValueError(f"container mount path must be absolute, got {value!r}")
        return value


# --------------------------------------------------------------------------- #
# 2.  Top-level model                                                         #
# --------------------------------------------------------------------------- #


class ConfigSchema(BaseModel):
    """Root configuration object consumed by the rest of *niftymatic*."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    output: OutputSection
    executables: ExecutablesSection
    docker: DockerSection
