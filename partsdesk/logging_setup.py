# partsdesk/logging_setup.py
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
LOG_FILE_NAME = "partsdesk.log"


def setup_logging(settings) -> Optional[Path]:
    """Configure console logging and, when LOG_DIR is set, a rotating log file."""
    level = getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)
    fmt = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers when the app is created more than once
    if not any(getattr(h, "_partsdesk", False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        console._partsdesk = True
        root.addHandler(console)

    if not settings.LOG_DIR:
        return None

    log_dir = Path(settings.LOG_DIR).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    handler = next(
        (h for h in root.handlers if getattr(h, "baseFilename", "").endswith(LOG_FILE_NAME)), None
    )
    if handler is None:
        handler = logging.handlers.RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        handler.setFormatter(fmt)
        handler.setLevel(level)
        root.addHandler(handler)

    # uvicorn keeps its own handlers, route them to the same file
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        if handler not in lg.handlers:
            lg.addHandler(handler)

    return log_path
