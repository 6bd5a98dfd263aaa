"""Base classes for containerised tools."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from niftymatic.engines import ExecutionEngine


@dataclass
class ToolSpec:
    """Specification returned by :meth:`Tool.build_spec`.

    Attributes mirror the arguments of :meth:`ExecutionEngine.run`.
    """

    tool: str
    args: Sequence[str]


class Tool:
    """Base class for wrappers around tools shipped in the container image."""

    #: Pipeline stage reported in logs and errors.
    stage: str = "tool"

    def execute(self, engine: ExecutionEngine, host_directory: str | Path) -> None:
        """Build a :class:`ToolSpec` and run it with *engine*."""
        spec = self.build_spec()
        engine.run(spec.tool, spec.args, host_directory, stage=self.stage)

    def build_spec(self) -> ToolSpec:
        """Return a :class:`ToolSpec` describing how to run this tool."""
        raise NotImplementedError
