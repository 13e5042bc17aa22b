"""
Logging builder: build a dictConfig mapping from Settings and apply it.

`make_dict_config(settings)` is pure and returns the mapping; `setup_logging`
creates LOG_DIR when file logging is enabled and applies the mapping.

Destinations:
  - console: always, json or text depending on LOG_FORMAT
  - file + error_file: rotating files under LOG_DIR when LOG_TO_STDOUT is false
  - error_console: ERROR and above on stderr when logging to stdout
"""
import logging
import logging.config
from pathlib import Path

from amtconfig.config.settings import Settings
from amtconfig.utils.logging import get_project_name
from .filters import ContextFilter, RedactFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    The returned mapping includes:
      - formatters: "standard" (colored for text output) and "json"
      - filters: "context", "redact"
      - handlers: console plus file/error_file or error_console
      - loggers: root, amtconfig, sqlalchemy.engine, httpx
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(tenant_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "context": {"()": ContextFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
            },
            "amtconfig": {
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # SQL statements only when explicitly requested; they may carry values
            "sqlalchemy.engine": {
                "level": "INFO" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            # httpx logs full request URLs at INFO (secret paths, webhook URL)
            "httpx": {
                "level": "WARNING",
                "propagate": True,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger(__name__).debug(
        "logging.configured",
        extra={"log_level": settings.LOG_LEVEL, "log_format": settings.LOG_FORMAT},
    )
