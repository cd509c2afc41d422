import os
import signal
import sys

from smallsh.config import ENTER_FG_ONLY, EXIT_FG_ONLY

TOGGLE_SIGNAL = signal.SIGTSTP


class ModeController:
    """
    Owns the background-permission flag.

    The flag is written only from the SIGTSTP handler and read by the
    launcher; it is a single attribute so every read sees a whole value.
    """

    def __init__(self, background_allowed=True, out_fd=None):
        self.background_allowed = background_allowed
        self._out_fd = out_fd

    def toggle(self, signum=None, frame=None):
        """SIGTSTP handler: flip the flag and announce the new mode."""
        if self.background_allowed:
            banner = ENTER_FG_ONLY
        else:
            banner = EXIT_FG_ONLY
        self.background_allowed = not self.background_allowed
        # Pre-formatted text straight to the descriptor, no buffered print
        fd = self._out_fd if self._out_fd is not None else sys.stdout.fileno()
        os.write(fd, banner.encode())


def init_signal_handlers(controller):
    """Shell ignores Ctrl+C; Ctrl+Z toggles foreground-only mode."""
    signal.signal(signal.SIGINT, signal.SIG_IGN)
    signal.signal(TOGGLE_SIGNAL, controller.toggle)


def restore_interrupt():
    """Run in a foreground child before exec so Ctrl+C can kill it."""
    signal.signal(signal.SIGINT, signal.SIG_DFL)
