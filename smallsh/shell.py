import sys
from dataclasses import dataclass, field

from smallsh.builtin import builtin_exit, execute_builtin
from smallsh.config import MAX_INPUT, PROMPT, SHELL_NAME
from smallsh.executor import launch
from smallsh.jobs import JobTable, reap_background
from smallsh.parser import EMPTY, ParseError, parse_command
from smallsh.signals import ModeController, init_signal_handlers


@dataclass
class ShellState:
    mode: ModeController = field(default_factory=ModeController)
    jobs: JobTable = field(default_factory=JobTable)
    last_status: object = None


def read_line(prompt=PROMPT):
    """
    Prompt and read one line, cut to the input buffer size.
    Raises EOFError at end of input.
    """
    line = input(prompt)
    limit = MAX_INPUT - 1
    if len(line) > limit:
        print(f"{SHELL_NAME}: input truncated to {limit} characters", file=sys.stderr, flush=True)
        line = line[:limit]
    return line


def run_line(state, line):
    """One cycle: reap finished jobs, then parse and run line."""
    reap_background(state.jobs)

    try:
        cmd = parse_command(line)
    except ParseError as e:
        print(f"{SHELL_NAME}: {e}", flush=True)
        return
    if cmd is EMPTY:
        return

    if execute_builtin(cmd, state):
        return
    launch(cmd, state, line.strip())


def main_loop(state=None):
    """Main shell loop; leaves through the exit built-in"""
    if state is None:
        state = ShellState()
    init_signal_handlers(state.mode)

    while True:
        try:
            line = read_line()
        except EOFError:
            print()
            builtin_exit(state)
        run_line(state, line)


def init_stdio(*streams):
    """Pass undecodable bytes through to argv and paths instead of failing."""
    for stream in streams or (sys.stdin, sys.stdout):
        stream.reconfigure(errors="surrogateescape")


def main():
    init_stdio()
    main_loop()
