import os
from dataclasses import dataclass, field

from smallsh.config import MAX_ARGS

COMMENT = "#"
BACKGROUND = "&"
REDIRECT_IN = "<"
REDIRECT_OUT = ">"
PID_TOKEN = "$$"
NUL = "\x00"


class ParseError(ValueError):
    """Raised for a line that cannot be turned into a command."""


@dataclass
class Command:
    program: str
    args: list = field(default_factory=list)
    infile: str = None
    outfile: str = None
    background: bool = False


class _Empty:
    """Blank line or comment: nothing to run."""

    def __repr__(self):
        return "EMPTY"

    def __bool__(self):
        return False


EMPTY = _Empty()


def expand_pid(token, pid):
    """Replace every `$$` in token with pid, scanning left to right."""
    return token.replace(PID_TOKEN, str(pid))


def parse_command(line, pid=None):
    """
    Parse one input line.
    Returns: Command, or EMPTY for a blank line / comment.
    Raises ParseError for a malformed line.
    """
    if not line.strip() or line.startswith(COMMENT):
        return EMPTY

    if pid is None:
        pid = os.getpid()

    if NUL in line:
        raise ParseError("embedded null byte")

    tokens = line.split()
    program = tokens[0]
    cmd = Command(program=program, args=[program])

    # Arguments up to the first redirection operator
    i = 1
    while i < len(tokens) and tokens[i] not in (REDIRECT_IN, REDIRECT_OUT):
        tok = tokens[i]
        i += 1
        if tok == BACKGROUND and i == len(tokens):
            cmd.background = True
            break
        cmd.args.append(expand_pid(tok, pid))

    if len(cmd.args) > MAX_ARGS:
        raise ParseError(f"too many arguments (limit {MAX_ARGS})")

    # Redirections, any order, last one wins
    while i < len(tokens) and tokens[i] in (REDIRECT_IN, REDIRECT_OUT):
        op = tokens[i]
        if i + 1 >= len(tokens):
            raise ParseError("missing redirection target")
        if op == REDIRECT_IN:
            cmd.infile = tokens[i + 1]
        else:
            cmd.outfile = tokens[i + 1]
        i += 2

    rest = tokens[i:]
    if rest == [BACKGROUND]:
        cmd.background = True
    elif rest:
        raise ParseError(f"unexpected token '{rest[0]}'")

    return cmd
