"""
Custom logging formatters.

  - JsonFormatter: one JSON object per line for log collectors. Carries the
    service, environment and version plus every `extra` attribute, so
    structured events such as `repo.insert.success` stay queryable.
  - ColorFormatter: compact ANSI-colored lines for local development.

Formatters never redact; that is RedactFilter's job, which handlers apply
before formatting.
"""
import json
import logging
from logging import LogRecord
from typing import Any

from amtconfig.utils.logging import get_project_version

# attributes every LogRecord carries; anything else came from `extra`
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Construction:
      - env: environment name (e.g., "development" | "production"); optional.
      - service: logical service name included in every record.
      - datefmt: optional date format passed to logging.Formatter.

    Non-serializable extras are converted with `str()`, so formatting never raises.
    """

    def __init__(self, *, env: str | None = None, service: str = "amtconfig", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service
        self.version = get_project_version()

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "request_id": getattr(record, "request_id", "-"),
            "tenant_id": getattr(record, "tenant_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": self.version,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED or key in log_record or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_record[key] = value
            except (TypeError, ValueError):
                log_record[key] = str(value)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """Development formatter: TIMESTAMP | LEVEL | LOGGER | REQUEST_ID | TENANT | MESSAGE."""

    COLOR_CODES = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;41m",
        "RESET": "\033[0m",
    }

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<8}{reset} | "
            f"{record.name:<40} | "
            f"{getattr(record, 'request_id', '-'):<10} | "
            f"{getattr(record, 'tenant_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)
        return base
