import random
import threading
from datetime import datetime, timedelta

from cli_timer.alarm import PlaybackError, StopHandle
from cli_timer.app import App


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 2, 3, 4, 5)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FakePlayer:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []
        self.handles = []

    def __call__(self, sound_path):
        self.calls.append(sound_path)
        if self.fail:
            raise PlaybackError("no audio device")
        handle = StopHandle(threading.Event())
        self.handles.append(handle)
        return handle


def make_app(seconds=10, label=None, fail=False, **kwargs):
    clock = FakeClock()
    player = FakePlayer(fail=fail)
    app = App(
        timedelta(seconds=seconds),
        "alarm.ogg",
        label,
        clock=clock,
        rng=random.Random(0),
        player=player,
        tick_period=timedelta(milliseconds=250),
        **kwargs,
    )
    return app, clock, player


def run_ticks(app, clock, count, ms=250):
    for _ in range(count):
        clock.advance(milliseconds=ms)
        app.tick()
