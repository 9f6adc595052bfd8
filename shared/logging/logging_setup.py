"""Logging for the feed runner and the feed API.

Console lines can be colored per call (``logger.info(..., color="green")``),
the log file always gets plain text. Timestamps follow the TIMEZONE setting.
"""

from datetime import datetime
from functools import partialmethod
from logging import Logger
import logging
import logging.config
import os

from pytz import timezone

LOGGER_NAME = "shreddr_feed"
LOG_FILE = "feed.log"

_ANSI_RESET = "\033[0m"
_ANSI_COLORS: dict[str, str] = {
    "cyan":    "\033[36m",
    "green":   "\033[32m",
    "yellow":  "\033[33m",
    "red":     "\033[31m",
    "magenta": "\033[35m",
    "blue":    "\033[34m",
}
_LEVEL_MARKS: dict[int, str] = {
    logging.WARNING: "⚠️ ",
    logging.ERROR: "⛔ ",
    logging.CRITICAL: "⛔ ",
}


def _log_level() -> int:
    return logging.DEBUG if os.getenv("LOG_LEVEL", "info").strip().lower() == "debug" else logging.INFO


class ZonedFormatter(logging.Formatter):
    """Renders timestamps in a fixed zone and marks warnings and errors."""

    def __init__(self, tz_name: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        moment = datetime.fromtimestamp(record.created, self.tz)
        return moment.strftime(datefmt) if datefmt else moment.isoformat()

    def formatMessage(self, record):
        mark = _LEVEL_MARKS.get(record.levelno)
        if mark is None:
            return super().formatMessage(record)
        # the record is shared by all handlers, mark a copy
        marked = logging.makeLogRecord(record.__dict__)
        marked.message = mark + record.message
        return super().formatMessage(marked)


class ColoredFormatter(ZonedFormatter):
    def format(self, record) -> str:
        line = super().format(record)
        ansi = _ANSI_COLORS.get(getattr(record, "color", None) or "")
        return f"{ansi}{line}{_ANSI_RESET}" if ansi else line


class ColorLogger:
    """Wraps a :class:`logging.Logger` and adds ``color=`` to the level methods.

    Everything else (setLevel, handlers, ...) is delegated to the wrapped logger.
    """

    def __init__(self, logger: Logger):
        self._logger = logger

    def _log(self, level: int, msg, *args, color: str | None = None, **kwargs):
        if color is not None:
            kwargs["extra"] = {**(kwargs.get("extra") or {}), "color": color}
        self._logger.log(level, msg, *args, **kwargs)

    debug = partialmethod(_log, logging.DEBUG)
    info = partialmethod(_log, logging.INFO)
    warning = partialmethod(_log, logging.WARNING)
    error = partialmethod(_log, logging.ERROR)

    def exception(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.ERROR, msg, *args, color=color, exc_info=True, **kwargs)

    def __getattr__(self, name):
        return getattr(self._logger, name)


def setup_logging() -> ColorLogger:
    """Configure console and file logging and return the application logger.

    The log file is ``$ROOT_DIR/logs/feed.log`` (ROOT_DIR defaults to the working directory).
    """
    level = _log_level()
    log_dir = os.path.join(os.getenv("ROOT_DIR") or os.getcwd(), "logs")
    os.makedirs(log_dir, exist_ok=True)

    line_format = {
        "fmt": "%(asctime)s - %(levelname)s - %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
        "tz_name": os.getenv("TIMEZONE", "Europe/Berlin"),
    }
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"()": ZonedFormatter, **line_format},
            "colored": {"()": ColoredFormatter, **line_format},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "colored",
                "level": level,
                "stream": "ext://sys.stdout",
            },
            "file": {
                "class": "logging.FileHandler",
                "formatter": "plain",
                "level": level,
                "filename": os.path.join(log_dir, LOG_FILE),
                "encoding": "utf-8",
            },
        },
        "root": {"handlers": ["console", "file"], "level": level},
    })

    # the job poller hits the catalog every few seconds
    logging.getLogger("httpx").setLevel(logging.DEBUG if level == logging.DEBUG else logging.WARNING)

    return ColorLogger(logging.getLogger(LOGGER_NAME))
