"""
Public façade for the *pipelines* sub-package.

* **Value objects**
    * :class:`PipelineStage`
    * :class:`PathTranslation`
    * :class:`ReconstructionOptions`

* **Working directory**
    * :class:`WorkingDirectory`
    * :func:`search_by_extension`

The stage orchestrator lives in :mod:`niftymatic.pipelines.reconstruct` and
is imported from there directly; it depends on :mod:`niftymatic.tools`,
which in turn uses the value objects above.
"""

from __future__ import annotations

from .types import PathTranslation, PipelineStage, ReconstructionOptions
from .workdir import WorkingDirectory, search_by_extension

__all__: list[str] = [
    "PathTranslation",
    "PipelineStage",
    "ReconstructionOptions",
    "WorkingDirectory",
    "search_by_extension",
]
