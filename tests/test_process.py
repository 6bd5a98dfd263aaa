import pytest

from niftymatic.utils.errors import (
    CommandExecutionFailed,
    CommandSpawnFailed,
    ConversionFailed,
)
from niftymatic.utils.process import CommandInvocation, run_command


def test_success_streams_lines_in_order(stub_executable):
    """Verify every output line, blank ones included, reaches the callback in order."""
    tool = stub_executable("tool", 'echo one\necho\necho "two $1"\necho three >&2')
    lines: list[str] = []
    run_command(str(tool), ["arg"], stage="unit", on_line=lines.append)
    assert lines == ["one", "", "two arg", "three"]


def test_output_is_forwarded_while_running(stub_executable, tmp_path):
    """Verify lines arrive before the process exits.

    The script prints a line and then waits for a marker file that only the
    line callback creates. Buffering output until exit would make the script
    give up and fail.
    """
    marker = tmp_path / "seen"
    tool = stub_executable(
        "waiter",
        'echo ready\n'
        'i=0\n'
        'while [ ! -f "$1" ]; do\n'
        '  sleep 0.05\n'
        '  i=$((i+1))\n'
        '  [ "$i" -gt 200 ] && exit 3\n'
        'done\n'
        'echo done',
    )
    seen: list[str] = []

    def on_line(line: str) -> None:
        seen.append(line)
        if line == "ready":
            marker.touch()

    run_command(str(tool), [str(marker)], stage="stream", on_line=on_line)
    assert seen == ["ready", "done"]


def test_working_directory_override(stub_executable, tmp_path):
    """Verify the child runs in the requested directory."""
    target = tmp_path / "elsewhere"
    target.mkdir()
    tool = stub_executable("where", "pwd")
    lines: list[str] = []
    run_command(str(tool), [], cwd=target, on_line=lines.append)
    assert lines == [str(target.resolve())]


def test_non_zero_exit_names_stage(stub_executable):
    """Verify a non-zero exit raises CommandExecutionFailed with the stage."""
    tool = stub_executable("fails", "echo partial\nexit 4")
    with pytest.raises(CommandExecutionFailed) as info:
        run_command(str(tool), [], stage="generate-masks")
    assert info.value.stage == "generate-masks"
    assert info.value.returncode == 4
    assert "generate-masks" in str(info.value)


def test_signal_termination_is_failure(stub_executable):
    """Verify a process killed by a signal is reported as a failure."""
    tool = stub_executable("killed", "kill -9 $$")
    with pytest.raises(CommandExecutionFailed) as info:
        run_command(str(tool), [], stage="reconstruct")
    assert info.value.returncode == -9
    assert "signal 9" in str(info.value)


def test_custom_error_class(stub_executable):
    """Verify converters can request ConversionFailed."""
    tool = stub_executable("bad", "exit 1")
    with pytest.raises(ConversionFailed) as info:
        run_command(str(tool), [], stage="convert-dicom", error_cls=ConversionFailed)
    assert info.value.stage == "convert-dicom"


def test_missing_binary_is_spawn_failure(tmp_path):
    """Verify a missing executable raises CommandSpawnFailed, not success."""
    with pytest.raises(CommandSpawnFailed) as info:
        run_command(str(tmp_path / "does-not-exist"), [], stage="convert-nifti")
    assert info.value.stage == "convert-nifti"


def test_non_executable_binary_is_spawn_failure(tmp_path):
    """Verify a file without the execute bit raises CommandSpawnFailed."""
    script = tmp_path / "plain.sh"
    script.write_text("#!/bin/sh\necho hi\n")
    script.chmod(0o644)
    with pytest.raises(CommandSpawnFailed):
        run_command(str(script), [], stage="convert-dicom")


def test_invocation_argv_stringifies_args(tmp_path):
    """Verify the argument vector is built from strings."""
    inv = CommandInvocation("medcon", ("-f", tmp_path / "v.nii.gz"), stage="convert-nifti")
    assert inv.argv() == ["medcon", "-f", str(tmp_path / "v.nii.gz")]
