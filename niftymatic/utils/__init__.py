"""
Public façade for the *utils* package.

Anything imported here becomes part of the *stable* public API.
Internal helpers live in their own modules and are **not** re-exported.
"""

from __future__ import annotations

# ─── errors ──────────────────────────────────────────────────────────────
from .errors import (
    ArchiveInvalid,
    CommandExecutionFailed,
    CommandSpawnFailed,
    ConfigurationInvalid,
    ConversionFailed,
    DirectoryCreationFailed,
    NiftymaticError,
    PathTranslationFailed,
    StagePreconditionFailed,
)

# ─── external processes ──────────────────────────────────────────────────
from .process import CommandInvocation, run_command

# ─── archives ────────────────────────────────────────────────────────────
from .archive import create as create_archive, extract as extract_archive

__all__: list[str] = [
    "ArchiveInvalid",
    "CommandExecutionFailed",
    "CommandSpawnFailed",
    "ConfigurationInvalid",
    "ConversionFailed",
    "DirectoryCreationFailed",
    "NiftymaticError",
    "PathTranslationFailed",
    "StagePreconditionFailed",
    "CommandInvocation",
    "run_command",
    "create_archive",
    "extract_archive",
]
