from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

from comanda.api.middleware.request_context import get_company_id, get_request_id

_LOGGING_CONFIGURED = False
_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "comanda-api")

_EXTRA_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "order_id",
    "company_id",
    "order_type",
    "table_id",
    "previous_order_id",
    "product_id",
    "position",
    "unit_status",
    "line_count",
    "released_count",
    "cache_key",
    "reason",
)


def _trace_fields() -> tuple[str | None, str | None]:
    span = trace.get_current_span()
    span_context = span.get_span_context()
    if not span_context.is_valid:
        return None, None
    return (
        format(span_context.trace_id, "032x"),
        format(span_context.span_id, "016x"),
    )


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        trace_id, span_id = _trace_fields()
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": _SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": get_request_id(),
            "trace_id": trace_id,
            "span_id": span_id,
        }

        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        if "company_id" not in payload and get_company_id():
            payload["company_id"] = get_company_id()

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str | None = None) -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    # uvicorn access lines would duplicate comanda.api.access.
    logging.getLogger("uvicorn.access").disabled = True

    _LOGGING_CONFIGURED = True
