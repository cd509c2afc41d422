"""Shared fixtures: a fresh shell state and helpers for real child processes."""

import contextlib
import os
import signal

import pytest

from smallsh.jobs import JobTable
from smallsh.shell import ShellState
from smallsh.signals import ModeController


@pytest.fixture
def state():
    """Shell state with a small job table; leftover jobs are killed afterwards."""
    st = ShellState(mode=ModeController(out_fd=1), jobs=JobTable(capacity=4))
    yield st
    for job in st.jobs.live():
        with contextlib.suppress(ProcessLookupError):
            os.kill(job.pid, signal.SIGKILL)
        job.proc.wait()


@pytest.fixture
def wait_done():
    """Block until a child has exited, leaving it for the reaper to collect."""

    def _wait(pid):
        os.waitid(os.P_PID, pid, os.WEXITED | os.WNOWAIT)

    return _wait
