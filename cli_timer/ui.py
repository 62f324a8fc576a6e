from __future__ import annotations

from datetime import timedelta
from typing import Tuple

from rich.align import Align
from rich.layout import Layout
from rich.style import Style
from rich.text import Text

from .app import App, Phase


RESTART_PROMPT = "Are you sure you want to restart the timer? (Press again to confirm, Esc/q to cancel)"
BACKGROUND = "black"


def split_time(time_left: timedelta) -> Tuple[int, int, int]:
    # int() truncates toward zero, so -5.7s shows as 5s of overtime
    total = abs(int(time_left.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return hours, minutes, seconds


def format_time_left(app: App) -> str:
    hours, minutes, seconds = split_time(app.time_left)
    prefix = "-" if app.phase is Phase.TRIGGERED else " "
    return f"{prefix}{hours:02d}:{minutes:02d}:{seconds:02d}"


def status_text(app: App) -> str:
    phase = app.phase
    if phase is Phase.PAUSED:
        return "Paused"
    if phase is Phase.CONFIRM_RESTART:
        return RESTART_PROMPT
    if phase is Phase.TRIGGERED:
        return app.label or ""
    return ""


def render(app: App) -> Layout:
    """Builds the frame: spacer, the clock and a status line."""
    accent = Style(color=app.color, bgcolor=BACKGROUND)
    blank = Style(bgcolor=BACKGROUND)

    layout = Layout()
    layout.split_column(
        Layout(name="top", ratio=49),
        Layout(name="time", ratio=5),
        Layout(name="status", ratio=46),
    )
    layout["top"].update(Align.center(Text(""), style=blank, vertical="top"))
    layout["time"].update(
        Align.center(Text(format_time_left(app), style=accent), style=blank, vertical="middle")
    )
    status = status_text(app)
    layout["status"].update(
        Align.center(Text(status, style=accent if status else blank), style=blank, vertical="top")
    )
    return layout
