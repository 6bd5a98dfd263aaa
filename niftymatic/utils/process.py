"""Synchronous execution of external commands with live log streaming.

:func:`run_command` is the single place where *niftymatic* starts child
processes. Host-native converters call it directly; containerised tools go
through :class:`niftymatic.engines.docker.DockerEngine`, which builds a
``docker run`` vector and then calls it as well.

Only the exit status decides success. The captured output is forwarded to
the log as it arrives and never inspected.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

import structlog

from .errors import CommandExecutionFailed, CommandSpawnFailed

log = structlog.get_logger()

LineSink = Callable[[str], None]


@dataclass(frozen=True)
class CommandInvocation:
    """A single external command.

    Attributes:
        binary: Executable name or path.
        args: Ordered arguments passed after *binary*.
        cwd: Optional working directory for the child process.
        stage: Pipeline stage issuing the command, used in logs and errors.
    """

    binary: str
    args: Sequence[str] = field(default_factory=tuple)
    cwd: Optional[Path] = None
    stage: str = "command"

    def argv(self) -> list[str]:
        """Return the complete argument vector."""
        return [str(self.binary), *(str(a) for a in self.args)]


def run_command(
    binary: str,
    args: Sequence[str],
    *,
    cwd: Optional[str | Path] = None,
    stage: str = "command",
    on_line: Optional[LineSink] = None,
    error_cls: type[CommandExecutionFailed] = CommandExecutionFailed,
) -> None:
    """Run *binary* with *args* and block until it exits.

    Args:
        binary: Executable to start.
        args: Arguments passed verbatim.
        cwd: Working directory for the child. ``None`` keeps the current one.
        stage: Name of the calling pipeline stage.
        on_line: Optional callback receiving each output line in addition to
            the log.
        error_cls: Exception raised on a non-zero exit. Converters pass
            :class:`~niftymatic.utils.errors.ConversionFailed`.

    Raises:
        CommandSpawnFailed: When the process cannot be started.
        CommandExecutionFailed: When the process exits non-zero or is killed
            by a signal (``error_cls`` instance).
    """
    invocation = CommandInvocation(binary, tuple(args), Path(cwd) if cwd else None, stage)
    execute(invocation, on_line=on_line, error_cls=error_cls)


def execute(
    invocation: CommandInvocation,
    *,
    on_line: Optional[LineSink] = None,
    error_cls: type[CommandExecutionFailed] = CommandExecutionFailed,
) -> None:
    """Execute a :class:`CommandInvocation`; see :func:`run_command`."""
    cmd = invocation.argv()
    log.info("command.start", stage=invocation.stage, cmd=" ".join(cmd), cwd=str(invocation.cwd or "."))

    try:
        proc = subprocess.Popen(
            cmd,
            cwd=invocation.cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            bufsize=1,
        )
    except OSError as exc:
        log.error("command.spawn_failed", stage=invocation.stage, binary=invocation.binary, error=str(exc))
        raise CommandSpawnFailed(invocation.stage, invocation.binary, str(exc)) from exc

    # Popen.__exit__ closes the pipe and waits, also when the reader raises.
    with proc:
        assert proc.stdout is not None
        for raw in proc.stdout:
            line = raw.rstrip("\r\n")
            log.debug("command.output", stage=invocation.stage, line=line)
            if on_line is not None:
                on_line(line)
        returncode = proc.wait()

    if returncode != 0:
        log.error("command.failed", stage=invocation.stage, returncode=returncode)
        raise error_cls(invocation.stage, returncode)
    log.debug("command.done", stage=invocation.stage)


__all__ = ["CommandInvocation", "run_command", "execute"]
