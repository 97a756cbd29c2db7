"""Tests for charship.platform.process module."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from charship.core.result import Err, Ok
from charship.platform.process import ProcessError, run, run_streamed

PY = sys.executable


class TestProcessError:
    """Test ProcessError dataclass."""

    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("xcrun", "stapler"),
            returncode=65,
            stdout="",
            stderr="",
        )
        assert str(error) == "xcrun stapler failed (exit 65)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("hdiutil", "create", "-volname", "char", "-ov"),
            returncode=1,
            stdout="",
            stderr="error",
        )
        assert str(error) == "hdiutil create -volname ... failed (exit 1)"

    def test_program_is_basename(self) -> None:
        error = ProcessError(("/usr/bin/codesign", "--force"), 1, "", "")
        assert error.program == "codesign"

    def test_program_empty_command(self) -> None:
        assert ProcessError((), 1, "", "").program == ""

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    """Test run function."""

    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "import sys; sys.exit(42)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert len(result.error.stderr) > 0

    def test_captures_stderr(self, tmp_path: Path) -> None:
        result = run(
            [PY, "-c", "import sys; sys.stderr.write('error msg'); sys.exit(1)"],
            cwd=tmp_path,
        )

        assert isinstance(result, Err)
        assert "error msg" in result.error.stderr

    def test_uses_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "char.dmg").write_text("content")

        result = run([PY, "-c", "import os; print(os.listdir('.'))"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "char.dmg" in result.value

    def test_uses_env(self, tmp_path: Path) -> None:
        env = os.environ.copy()
        env["CHARSHIP_TEST_VAR"] = "test_value"

        result = run(
            [PY, "-c", "import os; print(os.environ.get('CHARSHIP_TEST_VAR', ''))"],
            cwd=tmp_path,
            env=env,
        )

        assert isinstance(result, Ok)
        assert "test_value" in result.value


class TestRunStreamed:
    """Test run_streamed function."""

    def test_success_returns_none(self, tmp_path: Path) -> None:
        result = run_streamed([PY, "-c", "pass"], cwd=tmp_path)

        assert result == Ok(None)

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run_streamed([PY, "-c", "import sys; sys.exit(3)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == ""

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run_streamed(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
