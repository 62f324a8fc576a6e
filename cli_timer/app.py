from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from .alarm import PlaybackError, StopHandle, start_alarm


# Accent colors (rich color names). Index 0 is also the fallback.
PALETTE = (
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
    "bright_black",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
    "bright_white",
)

DEFAULT_DURATION = timedelta(seconds=5)
DEFAULT_TICK_PERIOD = timedelta(milliseconds=250)


class Phase(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    TRIGGERED = "triggered"
    CONFIRM_RESTART = "confirm_restart"


@dataclass(frozen=True)
class Mode:
    """Current phase; resume_to is carried only while paused."""

    phase: Phase
    resume_to: Optional[Phase] = None

    def __post_init__(self) -> None:
        if (self.phase is Phase.PAUSED) != (self.resume_to is not None):
            raise ValueError("resume_to must be set exactly when paused")
        if self.resume_to is Phase.PAUSED:
            raise ValueError("cannot resume into a paused state")

    @staticmethod
    def running() -> "Mode":
        return Mode(Phase.RUNNING)

    @staticmethod
    def paused(resume_to: Phase) -> "Mode":
        return Mode(Phase.PAUSED, resume_to)

    @staticmethod
    def triggered() -> "Mode":
        return Mode(Phase.TRIGGERED)

    @staticmethod
    def confirm_restart() -> "Mode":
        return Mode(Phase.CONFIRM_RESTART)


def pick_color(rng: random.Random) -> str:
    return PALETTE[rng.randrange(len(PALETTE))]


class App:
    def __init__(
        self,
        duration: timedelta = DEFAULT_DURATION,
        sound_path: str = "",
        label: Optional[str] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
        player: Callable[[str], StopHandle] = start_alarm,
        tick_period: timedelta = DEFAULT_TICK_PERIOD,
        restart_lead_in: Optional[timedelta] = None,
    ):
        self.clock = clock
        self.player = player
        self.tick_period = tick_period
        self.restart_lead_in = tick_period if restart_lead_in is None else restart_lead_in

        self.running = True
        self.mode = Mode.running()
        self.duration = duration
        self.time_left = duration
        self.end_time = self.clock() + duration
        # Use an instance RNG so the global random state stays untouched
        self.color = pick_color(rng or random.Random())
        self.label = label
        self.sound_path = sound_path
        self.stop_handle: Optional[StopHandle] = None

    @property
    def phase(self) -> Phase:
        return self.mode.phase

    @property
    def pre_pause_phase(self) -> Optional[Phase]:
        return self.mode.resume_to

    def tick(self) -> None:
        phase = self.phase
        if phase is Phase.RUNNING:
            self.time_left = self.end_time - self.clock()
            if self.time_left <= timedelta(0):
                self.start_sound()
                self.mode = Mode.triggered()
        elif phase is Phase.PAUSED:
            self.end_time = self.clock() + self.time_left
        elif phase is Phase.TRIGGERED:
            self.time_left = self.end_time - self.clock()
        # CONFIRM_RESTART: time stands still until the user decides

    def start_sound(self) -> None:
        try:
            self.stop_handle = self.player(self.sound_path)
        except PlaybackError as e:
            logging.error("Error playing sound: %s", e)

    def stop_sound(self) -> None:
        if self.stop_handle is not None:
            self.stop_handle.stop()
        self.stop_handle = None

    def quit(self) -> None:
        self.running = False

    def pause(self) -> None:
        if self.phase is not Phase.RUNNING:
            return
        self.time_left = self.end_time - self.clock()
        self.mode = Mode.paused(self.phase)

    def resume(self) -> None:
        if self.phase is not Phase.PAUSED:
            return
        self.end_time = self.clock() + self.time_left
        self.mode = Mode(self.mode.resume_to)

    def confirm_restart(self) -> None:
        if self.phase is Phase.RUNNING:
            self.mode = Mode.confirm_restart()

    def cancel_restart(self) -> None:
        if self.phase is Phase.CONFIRM_RESTART:
            self.mode = Mode.running()

    def restart(self) -> None:
        self.stop_sound()
        self.mode = Mode.running()
        self.time_left = self.duration
        self.end_time = self.clock() + self.duration + self.restart_lead_in
        logging.info("Timer restarted (%s)", self.duration)
