"""Logging setup.

- Console handler always (stdout/stderr of the host process).
- Optional file handler in `log_dir`, rotated daily (midnight), keeping
  `retention_days` files.
- ldap3 is kept at WARNING or above; its DEBUG output includes bind requests.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers installed by us, removed again on reconfiguration.
_file_handler: logging.Handler | None = None
_console_handler: logging.Handler | None = None


def _parse_level(level: str) -> int:
    level_str = (level or "INFO").strip().upper()
    if level_str not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level_str = "INFO"
    return getattr(logging, level_str)


def setup_logging(level: str = "INFO", log_dir: str | None = None, retention_days: int = 30) -> None:
    global _file_handler, _console_handler

    log_level = _parse_level(level)
    retention_days = max(1, min(365, int(retention_days or 30)))
    root = logging.getLogger()

    for h in (_file_handler, _console_handler):
        if h and h in root.handlers:
            root.removeHandler(h)
            h.close()
    _file_handler = None

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)
    _console_handler = ch

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(
            os.path.join(log_dir, "ad_lookup.log"),
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
            utc=True,
        )
        fh.suffix = "%Y-%m-%d"
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)
        _file_handler = fh

    root.setLevel(log_level)
    logging.getLogger("ldap3").setLevel(max(log_level, logging.WARNING))

    logging.getLogger("ad_lookup").debug(
        "Logging configured: level=%s, file=%s", logging.getLevelName(log_level), log_dir or "-"
    )


def setup_logging_from_settings(settings) -> None:
    setup_logging(level=settings.log_level, log_dir=settings.log_dir or None)
