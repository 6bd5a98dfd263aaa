from zipfile import ZipFile

import pytest

from niftymatic.utils.archive import create, extract, looks_like_archive, suffix_filter
from niftymatic.utils.errors import ArchiveInvalid


def test_extract_returns_sorted_files(make_archive, tmp_path):
    """Verify nested members are extracted and listed."""
    archive = make_archive("study.zip", {"b/IM2.dcm": b"2", "a/IM1.dcm": b"1"})
    dest = tmp_path / "dest"
    dest.mkdir()
    files = extract(archive, dest)
    assert files == [dest / "a" / "IM1.dcm", dest / "b" / "IM2.dcm"]


@pytest.mark.parametrize("name", ["missing.zip", "notes.txt"])
def test_extract_rejects_missing_or_wrong_suffix(tmp_path, name):
    """Verify only existing .zip files are accepted."""
    (tmp_path / "notes.txt").write_text("x")
    with pytest.raises(ArchiveInvalid):
        extract(tmp_path / name, tmp_path)


def test_create_packages_filtered_files_flat(tmp_path):
    """Verify only matching files are stored, under their base name."""
    src = tmp_path / "out"
    (src / "nested").mkdir(parents=True)
    (src / "s1.dcm").write_bytes(b"1")
    (src / "nested" / "s2.DCM").write_bytes(b"2")
    (src / "log.txt").write_text("skip")

    output = tmp_path / "result.zip"
    create(src, output, suffix_filter("dcm"))

    assert looks_like_archive(output)
    with ZipFile(output) as zf:
        assert sorted(zf.namelist()) == ["s1.dcm", "s2.DCM"]
        assert zf.read("s1.dcm") == b"1"
