import os
import subprocess

from smallsh.config import OUTPUT_MODE, SHELL_NAME
from smallsh.jobs import Job, JobTableFull, Status
from smallsh.signals import restore_interrupt

# exec failures the user sees as "no such file or directory"
EXEC_ERRORS = (FileNotFoundError, PermissionError, NotADirectoryError, IsADirectoryError)


def open_redirects(cmd, background):
    """
    Open the descriptors a child should get for stdin/stdout.
    Returns: (stdin, stdout, opened_fds) or None after reporting the error.
    """
    stdin, stdout, opened = None, None, []

    if cmd.infile is not None:
        try:
            stdin = os.open(cmd.infile, os.O_RDONLY)
        except OSError:
            print(f"cannot open {cmd.infile} for input", flush=True)
            return None
        opened.append(stdin)
    elif background:
        stdin = subprocess.DEVNULL

    if cmd.outfile is not None:
        try:
            stdout = os.open(cmd.outfile, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OUTPUT_MODE)
        except OSError:
            print(f"cannot open {cmd.outfile} for output", flush=True)
            close_all(opened)
            return None
        opened.append(stdout)
    elif background:
        stdout = subprocess.DEVNULL

    return stdin, stdout, opened


def close_all(fds):
    for fd in fds:
        try:
            os.close(fd)
        except OSError:
            pass


def run_external(cmd, stdin=None, stdout=None, foreground=True):
    """
    Start cmd with subprocess.
    Returns: Popen object, or None when the program could not be executed.
    Other OSErrors (fork failure) propagate to the caller.
    """
    try:
        return subprocess.Popen(
            cmd.args,
            stdin=stdin,
            stdout=stdout,
            preexec_fn=restore_interrupt if foreground else None,
        )
    except EXEC_ERRORS:
        print(f"{cmd.program}: no such file or directory", flush=True)
        return None


def launch(cmd, state, line=None):
    """
    Run a non-builtin command in the foreground or the background.
    Returns: the Status of a foreground run, None otherwise.
    """
    # One read of the flag per launch
    background = cmd.background and state.mode.background_allowed

    if background and state.jobs.full():
        print(f"{SHELL_NAME}: too many background jobs (limit {state.jobs.capacity})", flush=True)
        return None

    redirects = open_redirects(cmd, background)
    if redirects is None:
        # Nothing was started: no job for a background launch, status 1 otherwise
        if not background:
            state.last_status = Status(1)
        return None
    stdin, stdout, opened = redirects

    try:
        proc = run_external(cmd, stdin=stdin, stdout=stdout, foreground=not background)
    except OSError as e:
        print(f"{SHELL_NAME}: cannot run {cmd.program}: {e.strerror or e}", flush=True)
        return None
    finally:
        close_all(opened)

    if proc is None:
        if not background:
            state.last_status = Status(1)
        return None

    if background:
        return start_background(proc, state, line or " ".join(cmd.args))
    return wait_foreground(proc, state)


def wait_foreground(proc, state):
    """Block until proc ends and record its status."""
    status = Status.from_returncode(proc.wait())
    state.last_status = status
    if status.signaled:
        print(status, flush=True)
    return status


def start_background(proc, state, cmdline):
    try:
        state.jobs.insert(Job(proc.pid, cmdline, proc))
    except JobTableFull as e:
        print(f"{SHELL_NAME}: {e}", flush=True)
        return None
    print(f"background pid is {proc.pid}", flush=True)
    return None
