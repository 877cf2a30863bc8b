from __future__ import annotations

import sys
from pathlib import Path

import pytest

from addon_deploy.build.invoker import CommandResult, SubprocessExecutor, run_build
from addon_deploy.config import BuildConfig
from addon_deploy.errors import BuildFailed

from conftest import StubExecutor


def test_successful_build_reports_status(project_root: Path):
    executor = StubExecutor(returncode=0)
    result = run_build(BuildConfig(), project_root, executor=executor)

    assert result.ok
    assert result.returncode == 0
    assert result.command == ("cargo", "build", "--release")
    assert executor.calls == [(("cargo", "build", "--release"), project_root)]


def test_nonzero_exit_raises_build_failed(project_root: Path):
    executor = StubExecutor(returncode=101)
    with pytest.raises(BuildFailed) as excinfo:
        run_build(BuildConfig(), project_root, executor=executor)

    assert excinfo.value.returncode == 101
    assert "build output above" in str(excinfo.value)
    assert excinfo.value.exit_code == 1


def test_missing_build_tool_raises_build_failed(project_root: Path):
    executor = StubExecutor(raises=FileNotFoundError(2, "No such file or directory", "cargo"))
    with pytest.raises(BuildFailed, match="cargo"):
        run_build(BuildConfig(), project_root, executor=executor)


def test_custom_command_is_passed_through(project_root: Path):
    executor = StubExecutor()
    run_build(BuildConfig(command=["make", "release"]), project_root, executor=executor)
    assert executor.calls[0][0] == ("make", "release")


def test_blank_program_is_rejected():
    with pytest.raises(ValueError):
        BuildConfig(command=["  ", "build"])


def test_subprocess_executor_returns_real_exit_status(tmp_path: Path):
    executor = SubprocessExecutor()
    ok = executor.run([sys.executable, "-c", "pass"], tmp_path)
    failed = executor.run([sys.executable, "-c", "raise SystemExit(3)"], tmp_path)

    assert ok.returncode == 0
    assert failed.returncode == 3


def test_subprocess_executor_runs_in_given_directory(tmp_path: Path):
    script = "import pathlib; pathlib.Path('marker.txt').write_text('x')"
    SubprocessExecutor().run([sys.executable, "-c", script], tmp_path)
    assert (tmp_path / "marker.txt").exists()


def test_command_result_carries_only_exit_status():
    assert CommandResult(returncode=4) == CommandResult(4)
    assert not hasattr(CommandResult(returncode=0), "stdout")
