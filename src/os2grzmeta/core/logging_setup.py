import logging
import logging.handlers
from pathlib import Path

DEFAULT_FMT = "%(asctime)s - %(levelname)-5s - %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"

def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    if getattr(setup_logging, "_configured", False):
        return  # prevent double-config

    root = logging.getLogger()
    root.setLevel(level.upper())

    # Console (stderr, keeps stdout for the confirmation message)
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter(DEFAULT_FMT, datefmt=DATE_FMT))
    root.addHandler(ch)

    # Rotating file, only when asked for
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        fh.setFormatter(logging.Formatter(DEFAULT_FMT, datefmt=DATE_FMT))
        root.addHandler(fh)

    setup_logging._configured = True
