"""Execution back-ends for running containerised tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence


class ExecutionEngine(ABC):
    """Abstract execution engine.

    Concrete implementations launch a tool inside an isolated environment
    that sees exactly one host directory. Every path in *args* must already
    be expressed relative to the engine's mount point.
    """

    #: Absolute path inside the isolated environment where the host
    #: directory becomes visible.
    mount_path: str

    @abstractmethod
    def build_command(
        self,
        tool: str,
        args: Sequence[str],
        host_directory: str | Path,
    ) -> list[str]:
        """Return the full argument vector, starting with the engine binary."""
        raise NotImplementedError

    @abstractmethod
    def run(
        self,
        tool: str,
        args: Sequence[str],
        host_directory: str | Path,
        *,
        stage: str,
    ) -> None:
        """Run *tool* with *args*, mounting *host_directory*.

        Args:
            tool: Executable name inside the image.
            args: Arguments for *tool*, already translated into the mount.
            host_directory: Host folder bind-mounted at :attr:`mount_path`.
            stage: Pipeline stage used in logs and errors.
        """
        raise NotImplementedError
