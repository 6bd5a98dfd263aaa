"""
Zip helpers for the input study archive and the final DICOM package.

Two operations are exposed:

* :func:`extract` unpacks an uploaded study archive into a working
  directory and reports every extracted file.
* :func:`create` packages the regenerated DICOM slices into a single flat
  archive that can be handed back to the caller.

Only zip archives are accepted as input. The check is strict: a file must
carry the ``.zip`` suffix, be readable by :mod:`zipfile`, and hold at least
one member.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable, List, Optional

import structlog

from .errors import ArchiveInvalid

log = structlog.get_logger()

FileFilter = Callable[[Path], bool]


def looks_like_archive(path: Path) -> bool:
    """Return *True* when *path* is an existing file ending in ``.zip``.

        >>> looks_like_archive(Path("notes.txt"))
        False

    Args:
        path: Filesystem path to test.
    """
    return path.is_file() and path.name.lower().endswith(".zip")


def suffix_filter(*suffixes: str) -> FileFilter:
    """Return a predicate accepting files whose suffix is in *suffixes*.

    Suffixes are compared case-insensitively and may be given with or
    without the leading dot.
    """
    wanted = {("." + s.lstrip(".")).lower() for s in suffixes}
    return lambda p: p.suffix.lower() in wanted


def _list_files(root: Path) -> List[Path]:
    """Return every regular file below *root*, sorted."""
    return sorted(p for p in root.rglob("*") if p.is_file())


def extract(archive: str | Path, destination: str | Path) -> List[Path]:
    """Unpack *archive* into *destination*.

    Args:
        archive: Path to a ``.zip`` file.
        destination: Existing directory receiving the members.

    Returns:
        Sorted list of all files present below *destination* afterwards.

    Raises:
        ArchiveInvalid: When *archive* is missing, not a zip, corrupt or
            empty.
    """
    archive = Path(archive).expanduser()
    destination = Path(destination)
    log.debug("archive.check", path=str(archive))

    if not looks_like_archive(archive):
        raise ArchiveInvalid(f"{archive} is not an existing .zip archive")

    try:
        with zipfile.ZipFile(archive) as zf:
            if not zf.namelist():
                raise ArchiveInvalid(f"{archive} is empty")
            bad = zf.testzip()
            if bad is not None:
                raise ArchiveInvalid(f"{archive} has a corrupt member: {bad}")
            zf.extractall(destination)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as exc:
        raise ArchiveInvalid(f"{archive} {exc}") from exc

    files = _list_files(destination)
    for f in files:
        log.debug("archive.extracted", file=str(f))
    log.info("archive.extract", archive=str(archive), dest=str(destination), files=len(files))
    return files


def create(
    source_dir: str | Path,
    output: str | Path,
    file_filter: Optional[FileFilter] = None,
) -> None:
    """Write matching files below *source_dir* into a new zip at *output*.

    Members are stored flat under their base filename, deflate-compressed,
    in sorted order. An existing *output* is overwritten.

    Args:
        source_dir: Directory scanned recursively.
        output: Destination archive path.
        file_filter: Predicate selecting files to include. ``None`` keeps all.
    """
    source_dir = Path(source_dir)
    output = Path(output)
    selected = [p for p in _list_files(source_dir) if file_filter is None or file_filter(p)]

    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in selected:
            zf.write(path, arcname=path.name)
    log.info("archive.create", output=str(output), members=len(selected))


__all__ = ["looks_like_archive", "suffix_filter", "extract", "create"]
