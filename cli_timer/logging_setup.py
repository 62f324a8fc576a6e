import logging
import os

from .config import LOG_DIR


def setup_logging(log_dir: str = LOG_DIR, level: str = "INFO") -> None:
    os.makedirs(log_dir, exist_ok=True)
    # The timer owns the screen; only warnings and errors go to the terminal.
    stream = logging.StreamHandler()
    stream.setLevel(logging.WARNING)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
        handlers=[
            logging.FileHandler(os.path.join(log_dir, "cli_timer.log"), encoding="utf-8"),
            stream,
        ],
    )
