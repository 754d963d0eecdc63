"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
Each test gets its own storage file and runs offline.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import os
import sqlite3
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def cli(tmp_path):
    """Return a runner for 'python -m korkort' against a temp storage file."""
    env = {
        **os.environ,
        "KORKORT_STORAGE_PATH": str(tmp_path / "state.db"),
        "KORKORT_OFFLINE_MODE": "true",
        "KORKORT_LOG_LEVEL": "ERROR",
    }

    def run(command: str, timeout: int = 30) -> tuple[int, str, str]:
        result = subprocess.run(
            [sys.executable, "-m", "korkort", *command.split()],
            cwd=PROJECT_ROOT,
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return result.returncode, result.stdout, result.stderr

    return run


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, cli):
        code, stdout, stderr = cli("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "korkort" in stdout.lower()
        assert "Commands" in stdout

    @pytest.mark.parametrize("command", ["status", "complete", "reset", "prefs", "reminders", "login"])
    def test_command_help(self, cli, command):
        code, stdout, stderr = cli(f"{command} --help")
        assert code == 0, f"{command} help failed: {stderr}"


class TestCLIFlow:
    """End-to-end flow through the CLI against a temp database."""

    def test_status_signed_out(self, cli):
        code, stdout, stderr = cli("status")

        assert code == 0, stderr
        assert "signed out" in stdout

    def test_complete_requires_identity(self, cli):
        code, stdout, _ = cli("complete 0")

        assert code == 1
        assert "Not signed in" in stdout

    def test_guest_completes_lessons(self, cli):
        assert cli("guest")[0] == 0

        code, stdout, stderr = cli("complete 0")
        assert code == 0, stderr
        assert "Lesson 0 completed" in stdout

        code, stdout, _ = cli("complete 0")
        assert "already completed" in stdout

        code, stdout, _ = cli("status")
        assert "Next lesson" in stdout

    def test_locked_lesson_rejected(self, cli):
        cli("guest")

        code, stdout, _ = cli("complete 5")

        assert code == 1
        assert "locked" in stdout

    def test_forced_completion(self, cli):
        cli("login user-42")

        code, stdout, stderr = cli("complete 5 --force")

        assert code == 0, stderr
        assert "Lesson 5 completed" in stdout

    def test_prefs_and_reminders(self, cli):
        cli("guest")

        code, stdout, stderr = cli("prefs --daily")
        assert code == 0, stderr

        code, stdout, _ = cli("reminders")
        assert "Time to Study!" in stdout

    def test_reset(self, cli):
        cli("guest")
        cli("complete 0")

        code, stdout, stderr = cli("reset --yes")

        assert code == 0, stderr
        assert "reset" in stdout.lower()

    def test_logout(self, cli):
        cli("guest")

        code, stdout, stderr = cli("logout --yes")
        assert code == 0, stderr

        _, stdout, _ = cli("status")
        assert "signed out" in stdout

    def test_logout_drops_reminders(self, cli):
        cli("login user-42")
        cli("prefs --daily")

        cli("logout --yes")

        _, stdout, _ = cli("reminders")
        assert "No reminders scheduled" in stdout

    def test_corrupt_streak_reported(self, cli, tmp_path):
        cli("login user-42")
        conn = sqlite3.connect(str(tmp_path / "state.db"))
        with conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                ("currentStreak_user-42", "abc"),
            )
        conn.close()

        code, stdout, stderr = cli("status")

        assert code == 1
        assert "Local storage error" in stdout
        assert "Traceback" not in stderr
