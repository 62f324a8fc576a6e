"""
Command line entry point: parse arguments, set up the terminal and run the
timer until the user quits.
"""
from __future__ import annotations

import argparse
import functools
import logging
from datetime import datetime, timedelta
from typing import Optional

from . import __version__
from .alarm import start_alarm
from .app import App
from .config import CONFIG_PATH, LOG_DIR, AppConfig, ensure_dirs
from .events import EventHandler, EventSourceError, KeyEvent, Tick
from .handler import handle_key_event
from .logging_setup import setup_logging
from .tui import TerminalError, Tui


def parse_duration(arg: str) -> timedelta:
    # Every colon separated field counts as seconds and the fields are added
    # up, so "1:2:3" is 6 seconds rather than 1h 2m 3s.
    total = 0
    for field in arg.split(":"):
        try:
            total += int(field)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid duration field: {field!r}") from None
    try:
        duration = timedelta(seconds=total)
        # The end time has to be a representable datetime as well
        datetime.now() + duration
    except OverflowError:
        raise argparse.ArgumentTypeError(f"duration out of range: {arg!r}") from None
    return duration


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cli-timer", description="Countdown timer for the terminal")
    p.add_argument(
        "-t",
        "--time",
        dest="duration",
        type=parse_duration,
        required=True,
        help="Timer duration; colon separated fields are summed as seconds (1:2:3 = 6s)",
    )
    p.add_argument("-s", "--sound", required=True, help="Path to the sound file to use")
    p.add_argument("-l", "--label", default=None, help="An optional label for when the timer goes off")
    p.add_argument("-c", "--config", default=CONFIG_PATH, help="Config file (default: %(default)s)")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return p


def run(app: App, tui: Tui) -> None:
    while app.running:
        tui.draw(app)
        event = tui.next_event()
        if isinstance(event, Tick):
            app.tick()
        elif isinstance(event, KeyEvent):
            handle_key_event(event, app)
        # Resize: the next draw picks up the new size


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = AppConfig.load(args.config)
    except (OSError, ValueError) as e:
        logging.error("Invalid config file %s: %s", args.config, e)
        return 1
    ensure_dirs()
    setup_logging(LOG_DIR, cfg.log_level)

    app = App(
        args.duration,
        args.sound,
        args.label,
        player=functools.partial(start_alarm, fade_in_ms=cfg.fade_in_ms),
        tick_period=cfg.tick_period,
        restart_lead_in=cfg.restart_lead_in,
    )
    logging.info("Timer started: %s, sound=%s", args.duration, args.sound)

    tui = Tui(EventHandler(cfg.tick_rate_ms))
    try:
        tui.init()
    except TerminalError as e:
        logging.error("%s", e)
        return 1

    failure: Optional[EventSourceError] = None
    try:
        run(app, tui)
    except EventSourceError as e:
        failure = e
    finally:
        tui.exit()

    if failure is not None:
        logging.error("Terminal event stream failed: %s", failure)
        return 1
    return 0
