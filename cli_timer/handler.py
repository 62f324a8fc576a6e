from __future__ import annotations

from .app import App, Phase
from .events import KeyEvent


def handle_key_event(key: KeyEvent, app: App) -> None:
    code = key.code
    # Exit on `Esc` or `q`, except while a restart is waiting for confirmation
    if code in ("esc", "q"):
        if app.phase is Phase.CONFIRM_RESTART:
            app.cancel_restart()
        else:
            app.quit()
    elif code in ("c", "C"):
        if key.ctrl:
            app.quit()
    elif code == " ":
        phase = app.phase
        if phase is Phase.RUNNING:
            app.pause()
        elif phase is Phase.PAUSED:
            app.resume()
        elif phase is Phase.TRIGGERED:
            app.restart()
    elif code in ("r", "R"):
        phase = app.phase
        if phase is Phase.RUNNING:
            app.confirm_restart()
        elif phase in (Phase.CONFIRM_RESTART, Phase.TRIGGERED):
            app.restart()
