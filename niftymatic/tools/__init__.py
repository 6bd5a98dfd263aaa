"""Wrappers for the tools shipped in the NiftyMIC container image."""

from .base import Tool, ToolSpec
from .niftymic import (
    ReconstructConfig,
    ReconstructVolumeTool,
    SegmentConfig,
    SegmentFetalBrainsTool,
)

__all__ = [
    "Tool",
    "ToolSpec",
    "SegmentConfig",
    "SegmentFetalBrainsTool",
    "ReconstructConfig",
    "ReconstructVolumeTool",
]
