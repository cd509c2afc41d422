import os

SHELL_NAME = "smallsh"
PROMPT = os.environ.get("SMALLSH_PROMPT", ": ")

# Input limits
MAX_INPUT = 2048  # line buffer, one character is kept for the terminator
MAX_ARGS = 512

# Background jobs
MAX_BG_PROC = int(os.environ.get("SMALLSH_MAX_JOBS", "100"))

# Created output files: rw-r--r--
OUTPUT_MODE = 0o644

ENTER_FG_ONLY = "Entering foreground-only mode (& is now ignored)\n"
EXIT_FG_ONLY = "Exiting foreground-only mode\n"
