"""
logutil.py – logger setup shared by the app, the sensor reader and the
web remote.  Everything ends up on stderr (coloured) and in runtime.log,
which the web remote serves at /log.
"""

from __future__ import annotations

import logging
import os
import sys

FORMAT  = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOGFILE = "runtime.log"


class Colorize:
    ANSI_RESET = "\033[0m"
    ANSI_MAP = {
        logging.INFO:    "\033[1m",        # bold
        logging.WARNING: "\033[33m",       # yellow
        logging.ERROR:   "\033[91m",       # bright red
        logging.FATAL:   "\033[30;101m",   # black on bright red
    }

    def __init__(self, formatter: logging.Formatter):
        self.formatter = formatter

    def format(self, record: logging.LogRecord) -> str:
        return "".join([
            self.ANSI_MAP.get(record.levelno, self.ANSI_RESET),
            self.formatter.format(record),
            self.ANSI_RESET,
        ])

    def __getattr__(self, name):
        return getattr(self.formatter, name)


def create_logger(name: str = "flowerwall",
                  stderr: bool = True,
                  logfile: str | None = LOGFILE,
                  colored: bool = True,
                  debug: bool = False) -> logging.Logger:
    """Configure and return the *name* logger (children inherit handlers)."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.handlers.clear()
    formatter = logging.Formatter(FORMAT)
    if stderr:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(Colorize(formatter) if colored else formatter)
        logger.addHandler(handler)
    if logfile:
        folder = os.path.dirname(logfile)
        if folder:
            os.makedirs(folder, exist_ok=True)
        handler = logging.FileHandler(logfile)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
