"""Pytest configuration and shared fixtures for niftymatic tests.

External tools are replaced by small ``/bin/sh`` scripts written into the
test's temporary directory, so the suite runs without dcm2niix, Docker or
XMedCon installed.
"""

from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable
from zipfile import ZipFile

import pytest

from niftymatic.config.schema import ConfigSchema

MOUNT = "/app/data"


@pytest.fixture(autouse=True)
def _isolated_logs(tmp_path, monkeypatch):
    """Keep JSON logs and config lookups inside the test's tmp folder."""
    monkeypatch.setenv("NIFTYMATIC_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("NIFTYMATIC_CONFIG", str(tmp_path / "no-system-config.yaml"))
    for var in (
        "NIFTYMATIC_OUTPUT_BASE_DIRECTORY",
        "NIFTYMATIC_EXECUTABLES_DCM2NIIX",
        "NIFTYMATIC_EXECUTABLES_DOCKER",
        "NIFTYMATIC_EXECUTABLES_MEDCON",
        "NIFTYMATIC_DOCKER_IMAGE",
        "NIFTYMATIC_DOCKER_WORKING_DIRECTORY",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def stub_executable(tmp_path) -> Callable[[str, str], Path]:
    """Return a factory writing an executable shell script into ``tmp_path/bin``."""
    bindir = tmp_path / "bin"
    bindir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        script = bindir / name
        script.write_text("#!/bin/sh\n" + body + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def make_archive(tmp_path) -> Callable[..., Path]:
    """Return a factory creating a zip with the given ``{name: bytes}`` members."""

    def _make(name: str = "scan01.zip", members: dict[str, bytes] | None = None) -> Path:
        archive = tmp_path / name
        members = {"IMAGE0001.dcm": b"dummy"} if members is None else members
        with ZipFile(archive, "w") as zf:
            for member, data in members.items():
                zf.writestr(member, data)
        return archive

    return _make


@pytest.fixture
def base_dir(tmp_path) -> Path:
    """Base directory that receives working directories (``/work`` analogue)."""
    work = tmp_path / "work"
    work.mkdir()
    return work


@pytest.fixture
def make_config(base_dir) -> Callable[..., ConfigSchema]:
    """Return a factory for a :class:`ConfigSchema` pointing at *base_dir*."""

    def _make(
        *,
        dcm2niix: str | Path = "dcm2niix",
        docker: str | Path = "docker",
        medcon: str | Path = "medcon",
        image: str = "renbem/niftymic",
        mount: str = MOUNT,
    ) -> ConfigSchema:
        return ConfigSchema(
            output={"base_directory": str(base_dir)},
            executables={"dcm2niix": str(dcm2niix), "docker": str(docker), "medcon": str(medcon)},
            docker={"image": image, "working_directory": mount},
        )

    return _make


class RecordingEngine:
    """Execution engine double that records calls instead of running Docker."""

    mount_path = MOUNT

    def __init__(self) -> None:
        self.calls: list[dict] = []

    def build_command(self, tool, args, host_directory):
        return ["docker", tool, *args]

    def run(self, tool, args, host_directory, *, stage):
        self.calls.append(
            {"tool": tool, "args": list(args), "host": Path(host_directory), "stage": stage}
        )


@pytest.fixture
def engine() -> RecordingEngine:
    """Fresh :class:`RecordingEngine`."""
    return RecordingEngine()
