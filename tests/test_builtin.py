"""Tests for cd, status and exit."""

import os
import signal
import subprocess

import pytest

from smallsh.builtin import execute_builtin, is_builtin
from smallsh.jobs import Job, Status
from smallsh.parser import parse_command


class TestDispatch:
    """Only cd, status and exit run in the shell."""

    @pytest.mark.parametrize("line", ["cd", "status", "exit"])
    def test_builtins(self, line: str) -> None:
        """Built-in names are recognised."""
        assert is_builtin(parse_command(line))

    def test_external_not_handled(self, state) -> None:
        """Anything else is left for the launcher."""
        assert not execute_builtin(parse_command("ls -l"), state)


class TestCd:
    """Changing the working directory."""

    def test_cd_path(self, state, tmp_path, monkeypatch) -> None:
        """cd with an argument goes there."""
        monkeypatch.chdir(os.getcwd())
        assert execute_builtin(parse_command(f"cd {tmp_path}"), state)
        assert os.getcwd() == str(tmp_path.resolve())

    def test_cd_home(self, state, tmp_path, monkeypatch) -> None:
        """Bare cd goes to $HOME."""
        monkeypatch.chdir(os.getcwd())
        monkeypatch.setenv("HOME", str(tmp_path))
        execute_builtin(parse_command("cd"), state)
        assert os.getcwd() == str(tmp_path.resolve())

    def test_cd_home_unset(self, state, capfd, monkeypatch) -> None:
        """Bare cd without $HOME reports and stays put."""
        monkeypatch.delenv("HOME", raising=False)
        before = os.getcwd()
        execute_builtin(parse_command("cd"), state)
        assert capfd.readouterr().out == "cd: HOME not set\n"
        assert os.getcwd() == before

    def test_cd_missing_directory(self, state, capfd, tmp_path) -> None:
        """A bad path prints one diagnostic and the shell keeps going."""
        before = os.getcwd()
        target = tmp_path / "missing"
        execute_builtin(parse_command(f"cd {target}"), state)
        assert capfd.readouterr().out == f"cd: {target}: No such file or directory\n"
        assert os.getcwd() == before


class TestStatus:
    """Reporting the last foreground result."""

    def test_default(self, state, capfd) -> None:
        """Before any foreground command, status is success."""
        execute_builtin(parse_command("status"), state)
        assert capfd.readouterr().out == "exit value 0\n"

    def test_exit_value(self, state, capfd) -> None:
        """The recorded exit value is printed."""
        state.last_status = Status(2)
        execute_builtin(parse_command("status"), state)
        assert capfd.readouterr().out == "exit value 2\n"

    def test_signal(self, state, capfd) -> None:
        """A signal death is printed as such."""
        state.last_status = Status(2, signaled=True)
        execute_builtin(parse_command("status &"), state)
        assert capfd.readouterr().out == "terminated by signal 2\n"


class TestExit:
    """Leaving the shell."""

    def test_exit_code_zero(self, state) -> None:
        """exit always ends with status 0."""
        state.last_status = Status(5)
        with pytest.raises(SystemExit) as exc:
            execute_builtin(parse_command("exit"), state)
        assert exc.value.code == 0

    def test_background_jobs_terminated(self, state) -> None:
        """Every live job gets SIGTERM."""
        proc = subprocess.Popen(["sleep", "30"])
        state.jobs.insert(Job(proc.pid, "sleep 30", proc))
        with pytest.raises(SystemExit):
            execute_builtin(parse_command("exit"), state)
        assert proc.wait(timeout=10) == -signal.SIGTERM
