"""Unit tests for utility functions (better_next_app.utils).

Tests cover:
- run_command (success, failure, timeout, cwd, env vars, capture=False)
- CommandError
- format_duration
- Rich output helpers
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from better_next_app.utils import (
    CommandError,
    create_progress,
    format_duration,
    print_error,
    print_list,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, _stdout, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
        )
        assert returncode == 3
        assert stderr == "bad"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _stderr = await run_command(["pwd"], cwd=tmp_path)
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_env_is_merged(self):
        returncode, stdout, _stderr = await run_command(
            [sys.executable, "-c", "import os; print(os.environ['BNA_TEST'], 'PATH' in os.environ)"],
            env={"BNA_TEST": "yes"},
        )
        assert returncode == 0
        assert stdout == "yes True"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self):
        returncode, stdout, stderr = await run_command(["sleep", "5"], timeout=1)
        assert returncode == -1
        assert stdout == ""
        assert "timed out" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_capture(self):
        returncode, stdout, stderr = await run_command(["true"], capture=False)
        assert returncode == 0
        assert (stdout, stderr) == ("", "")


class TestCommandError:
    @pytest.mark.unit
    def test_message(self):
        err = CommandError(["npm", "install"], 1, "ERR!")
        assert str(err) == "`npm install` exited with code 1: ERR!"
        assert err.returncode == 1

    @pytest.mark.unit
    def test_message_without_stderr(self):
        assert str(CommandError(["git", "init"], 128)) == "`git init` exited with code 128"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize("seconds, expected", [
        (0, "0.0s"),
        (3.7, "3.7s"),
        (59.94, "59.9s"),
        (65.2, "1m 5s"),
        (3600, "60m 0s"),
        (-1, "0.0s"),
    ])
    def test_format(self, seconds: float, expected: str):
        assert format_duration(seconds) == expected


class TestOutputHelpers:
    @pytest.mark.unit
    def test_messages(self, quiet_console):
        print_success("done")
        print_error("broken")
        print_warning("careful")
        print_step("Step")
        output = quiet_console.export_text()
        for text in ("done", "broken", "careful", "Step"):
            assert text in output

    @pytest.mark.unit
    def test_summary_table(self, quiet_console):
        print_summary_table({"Template": "app/ts"}, title="Creating x")
        output = quiet_console.export_text()
        assert "Creating x" in output
        assert "app/ts" in output

    @pytest.mark.unit
    def test_list(self, quiet_console):
        print_list("Installing:", ["next", "react"])
        output = quiet_console.export_text()
        assert "Installing:" in output
        assert "- next" in output
        assert "- react" in output

    @pytest.mark.unit
    def test_progress_is_transient(self, quiet_console):
        progress = create_progress()
        assert progress.live.transient is True
