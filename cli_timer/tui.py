from __future__ import annotations

import logging
import sys
import termios
import tty
from typing import Optional

from rich.console import Console
from rich.live import Live

from .app import App
from .events import Event, EventHandler
from .ui import render


class TerminalError(Exception):
    """The terminal could not be put into interactive mode."""


class Tui:
    def __init__(self, events: EventHandler, console: Optional[Console] = None):
        self.events = events
        self.console = console or Console()
        self.live: Optional[Live] = None
        self._fd: Optional[int] = None
        self._old_settings = None

    def init(self) -> None:
        try:
            fd = sys.stdin.fileno()
            self._old_settings = termios.tcgetattr(fd)
            self._fd = fd
            mode = termios.tcgetattr(fd)
            # Like tty.setraw, but keep output processing so rich can draw normally
            mode[tty.IFLAG] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
            mode[tty.LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
            mode[tty.CC][termios.VMIN] = 1
            mode[tty.CC][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSAFLUSH, mode)
        except (termios.error, OSError, ValueError) as e:
            self.exit()
            raise TerminalError(f"Could not set up the terminal: {e}") from e

        self.events.start()
        self.live = Live(console=self.console, screen=True, auto_refresh=False, transient=True)
        self.live.start()

    def draw(self, app: App) -> None:
        if self.live is not None:
            self.live.update(render(app), refresh=True)

    def next_event(self) -> Event:
        return self.events.next()

    def exit(self) -> None:
        if self.live is not None:
            self.live.stop()
            self.live = None
        self.events.close()
        if self._fd is not None and self._old_settings is not None:
            try:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)
            except termios.error:
                logging.exception("Failed to restore terminal settings")
        self._fd = None
        self._old_settings = None
