"""
Structured logging configuration for the drywall quantity estimator.

Every record emitted while an HTTP request is being served carries that
request's id, so the engine lines of a calculation ("Item Muro #2 excluded")
can be joined back to the request line written by the timing middleware.
"""
import logging
import json
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

# Extra fields copied from the record into the JSON entry when present
CONTEXT_FIELDS = (
    "request_id",
    "work_area",
    "item_count",
    "item_number",
    "error_count",
    "material_count",
    "duration_ms",
    "http_method",
    "http_path",
    "http_status",
)

_request_id: ContextVar[Optional[str]] = ContextVar("tablayeso_request_id", default=None)


def bind_request_id(request_id: Optional[str]):
    """Bind ``request_id`` to the current context; returns the reset token."""
    return _request_id.set(request_id)


def reset_request_id(token) -> None:
    _request_id.reset(token)


def current_request_id() -> Optional[str]:
    return _request_id.get()


class RequestContextFilter(logging.Filter):
    """Stamps the bound request id on records that don't carry one."""

    def filter(self, record):
        if getattr(record, "request_id", None) is None:
            request_id = _request_id.get()
            if request_id is not None:
                record.request_id = request_id
        return True


class JSONFormatter(logging.Formatter):
    """JSON structured log formatter for production."""
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value
        return json.dumps(log_entry, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Plain text for local runs; appends the request id and item number."""

    def __init__(self):
        super().__init__("%(asctime)s [%(name)s] %(levelname)s: %(message)s")

    def format(self, record):
        line = super().format(record)
        context = []
        if getattr(record, "request_id", None):
            context.append(f"req={record.request_id}")
        if getattr(record, "item_number", None) is not None:
            context.append(f"item=#{record.item_number}")
        return f"{line} ({' '.join(context)})" if context else line


def setup_logging(level: str = "INFO", json_output: bool = True):
    """Configure application logging."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else TextFormatter())
    handler.addFilter(RequestContextFilter())

    root.handlers = [handler]

    # Suppress noisy loggers
    for name in ["uvicorn.access", "httpcore", "httpx", "multipart"]:
        logging.getLogger(name).setLevel(logging.WARNING)
