"""JSON-lines logging tagged with the request id.

The id comes from the client's X-Request-ID header when present, otherwise a
fresh uuid4 hex. It is stored on ``g`` for the request and echoed back on
the response.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
# record attributes copied into the JSON line when a call passes them in extra=
EXTRA_KEYS = ("user_id", "method", "path", "status", "elapsed_ms")

access_log = logging.getLogger("api.access")


def current_request_id() -> str | None:
    if not has_request_context():
        return None
    if "request_id" not in g:
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
    return g.request_id


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        return True


class JSONLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        line.update({key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)})
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Replace the root handlers with a single JSON handler on stdout."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONLineFormatter())
    handler.addFilter(RequestContextFilter())
    root = logging.getLogger()
    root.handlers[:] = [handler]
    resolved = getattr(logging, str(level).upper(), None)
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)


def init_app(app: Flask) -> None:
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    @app.before_request
    def _start_timer() -> None:
        current_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _access_log(response):
        started = g.pop("request_started", None)
        access_log.info(
            "%s %s %s",
            request.method,
            request.path,
            response.status_code,
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000, 2) if started else None,
            },
        )
        response.headers[REQUEST_ID_HEADER] = current_request_id()
        return response
