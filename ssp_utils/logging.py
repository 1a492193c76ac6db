"""
Project-local logging wrapper that configures handlers and re-exports stdlib logging.
Usage in your code:
    import ssp_utils.logging as logging
    logging.setup(log_dir="logs", level="INFO")
    logger = logging.getLogger(__name__)
"""
from __future__ import annotations

from pathlib import Path
import logging as _stdlog
from logging.handlers import RotatingFileHandler

from ssp_utils.context import LogContextFilter


def setup(
    log_dir: str = "logs",
    level: str = "INFO",
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> _stdlog.Logger:
    """
    Configure console + rotating file handlers.
    Safe to call multiple times; guarded by a flag on the root logger.
    """
    root = _stdlog.getLogger()
    if getattr(root, "_ssp_local_logging_initialized", False):
        return root

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    app_path = Path(log_dir) / "app.log"
    err_path = Path(log_dir) / "errors.log"

    fmt = (
        "%(asctime)s | %(levelname)s | %(name)s | "
        "instance=%(instance_id)s backend=%(backend)s | "
        "%(message)s"
    )
    lvl = getattr(_stdlog, level.upper(), _stdlog.INFO)

    root.setLevel(lvl)

    console = _stdlog.StreamHandler()
    console.setLevel(lvl)
    console.setFormatter(_stdlog.Formatter(fmt))

    file_info = RotatingFileHandler(str(app_path), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    file_info.setLevel(lvl)
    file_info.setFormatter(_stdlog.Formatter(fmt))

    file_err = RotatingFileHandler(str(err_path), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    file_err.setLevel(_stdlog.ERROR)
    file_err.setFormatter(_stdlog.Formatter(fmt))

    filt = LogContextFilter()
    for handler in (console, file_info, file_err):
        handler.addFilter(filt)
        root.addHandler(handler)

    root._ssp_local_logging_initialized = True  # type: ignore[attr-defined]
    return root


# Re-export stdlib logging API so you can use this module like logging
getLogger = _stdlog.getLogger
DEBUG = _stdlog.DEBUG
INFO = _stdlog.INFO
WARNING = _stdlog.WARNING
ERROR = _stdlog.ERROR
CRITICAL = _stdlog.CRITICAL
exception = _stdlog.exception
