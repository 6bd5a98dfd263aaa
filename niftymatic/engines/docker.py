"""Docker execution engine."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import structlog

from niftymatic.config.schema import ConfigSchema
from niftymatic.utils.process import run_command

from .base import ExecutionEngine

log = structlog.get_logger()


class DockerEngine(ExecutionEngine):
    """Run tools inside Docker containers with a single bind mount."""

    def __init__(self, executable: str, image: str, mount_path: str) -> None:
        """Configure the engine.

        Args:
            executable: Docker (or compatible) CLI binary.
            image: Image reference holding the tools.
            mount_path: In-container path of the bind-mounted host folder.
        """
        self.executable = executable
        self.image = image
        self.mount_path = mount_path

    @classmethod
    def from_config(cls, cfg: ConfigSchema) -> "DockerEngine":
        """Build an engine from the ``executables`` and ``docker`` sections."""
        return cls(cfg.executables.docker, cfg.docker.image, cfg.docker.working_directory)

    def build_command(
        self,
        tool: str,
        args: Sequence[str],
        host_directory: str | Path,
    ) -> list[str]:
        """Return ``docker run --rm -v <host>:<mount> <image> <tool> <args…>``."""
        cmd: list[str] = [
            self.executable,
            "run",
            "--rm",
            "-v",
            f"{host_directory}:{self.mount_path}",
            self.image,
            tool,
        ]
        cmd.extend(str(a) for a in args)
        return cmd

    def run(
        self,
        tool: str,
        args: Sequence[str],
        host_directory: str | Path,
        *,
        stage: str,
    ) -> None:
        """Execute *tool* in :attr:`image` and block until the container exits.

        Raises:
            CommandSpawnFailed: If the Docker CLI cannot be started.
            CommandExecutionFailed: If the container exits with a non-zero
                status.
        """
        cmd = self.build_command(tool, args, host_directory)
        log.info("docker.run", image=self.image, tool=tool, mount=f"{host_directory}:{self.mount_path}")
        run_command(cmd[0], cmd[1:], stage=stage)
