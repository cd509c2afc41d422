import os
import signal
from dataclasses import dataclass

import psutil

from smallsh.config import MAX_BG_PROC


@dataclass(frozen=True)
class Status:
    """How a child ended: exit code, or the signal that killed it."""
    value: int = 0
    signaled: bool = False

    @classmethod
    def from_returncode(cls, returncode):
        """subprocess convention: -N means killed by signal N."""
        if returncode < 0:
            return cls(-returncode, signaled=True)
        return cls(returncode)

    @classmethod
    def from_wait_status(cls, wait_status):
        if os.WIFSIGNALED(wait_status):
            return cls(os.WTERMSIG(wait_status), signaled=True)
        return cls(os.waitstatus_to_exitcode(wait_status))

    @property
    def returncode(self):
        return -self.value if self.signaled else self.value

    def __str__(self):
        if self.signaled:
            return f"terminated by signal {self.value}"
        return f"exit value {self.value}"


class JobTableFull(RuntimeError):
    pass


@dataclass
class Job:
    pid: int
    cmdline: str = ""
    proc: object = None


class JobTable:
    """Fixed number of slots holding the background jobs still running."""

    def __init__(self, capacity=MAX_BG_PROC):
        self.capacity = capacity
        self._slots = [None] * capacity

    def __len__(self):
        return sum(1 for job in self._slots if job is not None)

    def full(self):
        return all(job is not None for job in self._slots)

    def insert(self, job):
        """Put job in the first free slot. Returns the slot index."""
        free = None
        for i, cur in enumerate(self._slots):
            if cur is None:
                if free is None:
                    free = i
            elif cur.pid == job.pid:
                return i
        if free is None:
            raise JobTableFull(f"too many background jobs (limit {self.capacity})")
        self._slots[free] = job
        return free

    def remove(self, pid):
        """Clear the slot holding pid. Missing pids are ignored."""
        for i, job in enumerate(self._slots):
            if job is not None and job.pid == pid:
                self._slots[i] = None
                return job
        return None

    def get(self, pid):
        for job in self._slots:
            if job is not None and job.pid == pid:
                return job
        return None

    def live(self):
        return [job for job in self._slots if job is not None]

    def pids(self):
        return [job.pid for job in self.live()]


def reap_background(table):
    """
    Collect every finished background child without blocking.
    Prints one line per child and frees its slot.
    Returns: list of (pid, Status)
    """
    reaped = []
    while True:
        try:
            pid, wait_status = os.waitpid(-1, os.WNOHANG)
        except ChildProcessError:
            break
        if pid == 0:
            break

        status = Status.from_wait_status(wait_status)
        print(f"background pid {pid} is done: {status}", flush=True)

        job = table.remove(pid)
        if job is not None and job.proc is not None:
            # Already waited for; keep Popen from polling a reused pid
            job.proc.returncode = status.returncode
        reaped.append((pid, status))
    return reaped


def terminate_all(table):
    """Send SIGTERM to every live job (used by exit)."""
    for job in table.live():
        try:
            psutil.Process(job.pid).send_signal(signal.SIGTERM)
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied as e:
            print(f"Could not terminate job {job.pid}: {e}", flush=True)
