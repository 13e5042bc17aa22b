from .builder import make_dict_config, setup_logging
from .filters import (
    ContextFilter,
    RedactFilter,
    bind_tenant,
    get_request_id,
    get_tenant_id,
    log_context,
    reset_request_id,
    reset_tenant,
    set_request_id,
)
from .formatters import ColorFormatter, JsonFormatter

__all__ = [
    "setup_logging",
    "make_dict_config",
    "ContextFilter",
    "RedactFilter",
    "JsonFormatter",
    "ColorFormatter",
    "set_request_id",
    "reset_request_id",
    "get_request_id",
    "bind_tenant",
    "reset_tenant",
    "get_tenant_id",
    "log_context",
]
