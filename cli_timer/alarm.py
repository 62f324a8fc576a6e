from __future__ import annotations

import os
import threading
import logging
import weakref

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame


class PlaybackError(Exception):
    """The alarm sound could not be started."""


class StopHandle:
    """
    Send side of an alarm thread's stop signal.

    stop() may be called any number of times, also after the thread is gone.
    Dropping the last reference to the handle stops the alarm as well.
    """

    def __init__(self, stop_event: threading.Event):
        self._event = stop_event
        weakref.finalize(self, stop_event.set)

    def stop(self) -> None:
        self._event.set()

    @property
    def stopped(self) -> bool:
        return self._event.is_set()


def _open_mixer() -> None:
    # One mixer for the whole process; alarm threads never shut it down
    if pygame.mixer.get_init():
        return
    try:
        pygame.mixer.init()
    except pygame.error as e:
        raise PlaybackError(f"Could not open output device: {e}") from e


def _play_until_stopped(sound_path: str, fade_in_ms: int, stop_event: threading.Event) -> None:
    try:
        sound = pygame.mixer.Sound(sound_path)
    except (pygame.error, OSError) as e:
        logging.error("Could not decode %s: %s", sound_path, e)
        return

    sound.play(loops=-1, fade_ms=fade_in_ms)
    logging.info("Alarm playing: %s", os.path.basename(sound_path))

    stop_event.wait()
    sound.stop()
    logging.info("Alarm stopped")


def start_alarm(sound_path: str, fade_in_ms: int = 500) -> StopHandle:
    """
    Plays sound_path on an endless loop, fading in over fade_in_ms, on a
    background thread.
    Raises PlaybackError if the file cannot be opened or there is no audio
    output device. Decoding happens on the thread; a file that fails to
    decode is logged there and stays silent.
    """
    try:
        with open(sound_path, "rb"):
            pass
    except OSError as e:
        raise PlaybackError(f"Could not open {sound_path}: {e}") from e

    _open_mixer()

    stop_event = threading.Event()
    threading.Thread(
        target=_play_until_stopped,
        args=(sound_path, fade_in_ms, stop_event),
        name="AlarmPlayer",
        daemon=True,
    ).start()
    return StopHandle(stop_event)
