"""
Logging configuration for the Jungle Sportsbook

Console output for development, rotating log files for a deployed box, and
every record stamped with the request and the participant behind it.
"""

import logging
import logging.handlers
import os

from flask import g, has_request_context, request

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
REQUEST_FORMAT = PLAIN_FORMAT + " [%(method)s %(url)s] [%(participant)s]"
ERROR_FORMAT = PLAIN_FORMAT + " [%(pathname)s:%(lineno)d] [%(url)s] [%(remote_addr)s]"

MB = 1024 * 1024

# (file name, level or None for the app level, format, max bytes, backups, logger)
LOG_FILES = (
    ("sportsbook.log", None, REQUEST_FORMAT, 10 * MB, 5, ""),
    ("errors.log", logging.ERROR, ERROR_FORMAT, 5 * MB, 3, ""),
    ("scheduler.log", logging.INFO, PLAIN_FORMAT, 5 * MB, 3, "sportsbook.services.scheduler_service"),
)

QUIET_LOGGERS = ("werkzeug", "flask_limiter", "apscheduler")


class RequestContextFilter(logging.Filter):
    """Stamp url, method, remote_addr and participant on every record"""

    def filter(self, record):
        if has_request_context():
            record.url = request.path
            record.method = request.method
            record.remote_addr = request.remote_addr
            record.participant = g.get("participant") or "anonymous"
        else:
            record.url = record.method = record.remote_addr = "-"
            record.participant = "system"
        return True


class ColoredFormatter(logging.Formatter):
    """Colors the level name on console output"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if not color:
            return super().format(record)

        # File handlers share the record, so color a copy
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _console_handler(app, level):
    handler = logging.StreamHandler()
    handler.setLevel(level)
    if app.debug:
        handler.setFormatter(
            ColoredFormatter(PLAIN_FORMAT + " [%(filename)s:%(lineno)d]", datefmt="%H:%M:%S")
        )
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(RequestContextFilter())
    return handler


def _file_handlers(log_dir, app_level):
    """Yield (logger name, handler) for every entry in LOG_FILES"""
    os.makedirs(log_dir, exist_ok=True)

    for filename, level, fmt, max_bytes, backups, logger_name in LOG_FILES:
        handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, filename), maxBytes=max_bytes, backupCount=backups
        )
        handler.setLevel(level if level is not None else app_level)
        handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
        handler.addFilter(RequestContextFilter())
        yield logger_name, handler


def setup_logging(app):
    """
    Configure the root logger from LOG_LEVEL, LOG_TO_CONSOLE, LOG_TO_FILE
    and LOG_DIR. Safe to call once per app; existing handlers are replaced.
    """
    level = getattr(logging, app.config.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if app.config.get("LOG_TO_CONSOLE", True):
        root_logger.addHandler(_console_handler(app, level))

    if app.config.get("LOG_TO_FILE", True):
        for logger_name, handler in _file_handlers(app.config.get("LOG_DIR", "logs"), level):
            target = logging.getLogger(logger_name)
            if logger_name:
                for old in target.handlers[:]:
                    target.removeHandler(old)
            target.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app.logger.info(f"Logging configured - Level: {logging.getLevelName(level)}")
