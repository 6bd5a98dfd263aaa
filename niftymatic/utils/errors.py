"""Custom exceptions raised across the reconstruction pipeline.

Every error derives from :class:`NiftymaticError` so the CLI layer can turn
any failure into a single user-facing message without catching unrelated
exceptions. Nothing below the CLI swallows these errors.
"""

from __future__ import annotations

from pathlib import Path


class NiftymaticError(RuntimeError):
    """Base class for all pipeline errors."""


class ConfigurationInvalid(NiftymaticError):
    """Raised when the YAML configuration or an option value is unusable."""


class ArchiveInvalid(NiftymaticError):
    """Raised when an input archive is missing, empty or cannot be read."""


class DirectoryCreationFailed(NiftymaticError):
    """Raised when a working directory cannot be created."""


class PathTranslationFailed(NiftymaticError):
    """Raised when a path lies outside the root it should be translated from.

    This signals a programming error: callers only translate paths they
    built from the same working directory.
    """

    def __init__(self, path: Path | str, root: Path | str) -> None:
        self.path = Path(path)
        self.root = Path(root)
        super().__init__(f"{self.path} is not inside {self.root}")


class StagePreconditionFailed(NiftymaticError):
    """Raised when a working directory has not reached the required stage."""


class CommandSpawnFailed(NiftymaticError):
    """Raised when an external binary cannot be started at all."""

    def __init__(self, stage: str, binary: str, reason: str) -> None:
        self.stage = stage
        self.binary = binary
        super().__init__(f"{stage}: could not start {binary!r}: {reason}")


class CommandExecutionFailed(NiftymaticError):
    """Raised when an external process ran but did not exit with status 0.

    Attributes:
        stage: Pipeline stage that issued the command.
        returncode: Exit status reported by :mod:`subprocess`. Negative
            values mean the process was killed by signal ``-returncode``.
    """

    def __init__(self, stage: str, returncode: int) -> None:
        self.stage = stage
        self.returncode = returncode
        if returncode < 0:
            detail = f"terminated by signal {-returncode}"
        else:
            detail = f"exited with status {returncode}"
        super().__init__(f"{stage} failed: command {detail}")


class ConversionFailed(CommandExecutionFailed):
    """Raised when a host-native format converter exits unsuccessfully."""


__all__ = [
    "NiftymaticError",
    "ConfigurationInvalid",
    "ArchiveInvalid",
    "DirectoryCreationFailed",
    "PathTranslationFailed",
    "StagePreconditionFailed",
    "CommandSpawnFailed",
    "CommandExecutionFailed",
    "ConversionFailed",
]
