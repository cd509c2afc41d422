import os
import sys

from smallsh.jobs import Status, terminate_all


def builtin_cd(args):
    """Change directory, $HOME when no argument is given"""
    if args:
        path = args[0]
    else:
        path = os.environ.get("HOME")
        if not path:
            print("cd: HOME not set", flush=True)
            return 1
    try:
        os.chdir(path)
        return 0
    except OSError as e:
        print(f"cd: {path}: {e.strerror}", flush=True)
        return 1


def builtin_status(state):
    """Print how the last foreground command ended"""
    print(state.last_status or Status(0), flush=True)
    return 0


def builtin_exit(state):
    """Kill background jobs and leave the shell"""
    terminate_all(state.jobs)
    sys.exit(0)


BUILTINS = {
    "cd": lambda cmd, state: builtin_cd(cmd.args[1:]),
    "status": lambda cmd, state: builtin_status(state),
    "exit": lambda cmd, state: builtin_exit(state),
}


def is_builtin(cmd):
    return cmd.program in BUILTINS


def execute_builtin(cmd, state):
    """
    Run cmd inside the shell if it is a built-in.
    Redirections and & are ignored for built-ins.
    Returns: True if cmd was handled here.
    """
    handler = BUILTINS.get(cmd.program)
    if handler is None:
        return False
    handler(cmd, state)
    return True
