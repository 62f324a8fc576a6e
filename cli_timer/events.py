from __future__ import annotations

import logging
import os
import queue
import select
import shutil
import signal
import sys
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Union


class EventSourceError(Exception):
    """The terminal input stream failed or went away."""


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class KeyEvent:
    code: str
    ctrl: bool = False
    alt: bool = False


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


Event = Union[Tick, KeyEvent, Resize]

_CSI_KEYS = {"A": "up", "B": "down", "C": "right", "D": "left", "H": "home", "F": "end"}
_NAMED_BYTES = {"\r": "enter", "\n": "enter", "\t": "tab", "\x7f": "backspace", "\x08": "backspace"}


def decode_keys(data: bytes) -> List[KeyEvent]:
    """Splits a chunk of raw terminal input into key events."""
    text = data.decode("utf-8", errors="replace")
    keys: List[KeyEvent] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\x1b":
            nxt = text[i + 1] if i + 1 < n else ""
            if nxt in ("[", "O"):
                # CSI / SS3: parameters, then one final byte in @..~
                j = i + 2
                while j < n and not ("@" <= text[j] <= "~"):
                    j += 1
                final = text[j] if j < n else ""
                keys.append(KeyEvent(_CSI_KEYS.get(final, "unknown")))
                i = j + 1
            elif nxt.isalnum():
                keys.append(KeyEvent(nxt, alt=True))
                i += 2
            else:
                keys.append(KeyEvent("esc"))
                i += 1
            continue
        if ch in _NAMED_BYTES:
            keys.append(KeyEvent(_NAMED_BYTES[ch]))
        elif "\x01" <= ch <= "\x1a":
            keys.append(KeyEvent(chr(ord(ch) + 96), ctrl=True))
        elif ch.isprintable():
            keys.append(KeyEvent(ch))
        i += 1
    return keys


class EventHandler:
    """
    Merges a fixed-rate ticker, terminal key input and resize notifications
    into one queue. next() blocks until any of them has something.
    """

    def __init__(self, tick_rate_ms: int = 250, input_fd: Optional[int] = None):
        self.tick_rate = tick_rate_ms / 1000.0
        self.input_fd = input_fd
        # SimpleQueue.put is reentrant, so the SIGWINCH handler may call it
        # while the main thread is blocked in get()
        self._queue: "queue.SimpleQueue[Union[Event, EventSourceError]]" = queue.SimpleQueue()
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []
        self._prev_winch = None

    def start(self) -> None:
        if self.input_fd is None:
            self.input_fd = sys.stdin.fileno()
        for name, target in (("Ticker", self._tick_loop), ("InputReader", self._input_loop)):
            t = threading.Thread(target=target, name=name, daemon=True)
            t.start()
            self._threads.append(t)

        winch = getattr(signal, "SIGWINCH", None)
        if winch is not None and threading.current_thread() is threading.main_thread():
            self._prev_winch = signal.signal(winch, self._on_resize)

    def close(self) -> None:
        self._stop.set()
        winch = getattr(signal, "SIGWINCH", None)
        if winch is not None and self._prev_winch is not None:
            signal.signal(winch, self._prev_winch)
            self._prev_winch = None
        for t in self._threads:
            t.join(timeout=1.0)
        self._threads.clear()

    def next(self) -> Event:
        item = self._queue.get()
        if isinstance(item, EventSourceError):
            raise item
        return item

    def _tick_loop(self) -> None:
        # Schedule against the monotonic clock so handling time does not add drift
        deadline = time.monotonic() + self.tick_rate
        while not self._stop.wait(max(0.0, deadline - time.monotonic())):
            self._queue.put(Tick())
            deadline += self.tick_rate
            now = time.monotonic()
            if deadline < now:
                # Fell behind (suspended process); skip the missed ticks
                deadline = now + self.tick_rate

    def _input_loop(self) -> None:
        fd = self.input_fd
        try:
            while not self._stop.is_set():
                ready, _, _ = select.select([fd], [], [], 0.1)
                if not ready:
                    continue
                data = os.read(fd, 64)
                if not data:
                    raise EventSourceError("terminal input closed")
                for key in decode_keys(data):
                    self._queue.put(key)
        except EventSourceError as e:
            logging.error("Event source failed: %s", e)
            self._queue.put(e)
        except (OSError, ValueError) as e:
            logging.error("Event source failed: %s", e)
            self._queue.put(EventSourceError(str(e)))

    def _on_resize(self, signum, frame) -> None:
        size = shutil.get_terminal_size()
        self._queue.put(Resize(size.columns, size.lines))
