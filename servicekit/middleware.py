"""Flask hooks that assign trace IDs and log each incoming request."""

from __future__ import annotations

import logging
import time
import uuid
from datetime import timedelta
from typing import Any, Mapping

import flask

from .httpclient import TRACE_HEADER

_logger = logging.getLogger(__name__)
_STARTED = "_servicekit_request_started"


def log_filtered_status_code(status: int, prefix: str, attrs: Mapping[str, Any] | None = None) -> None:
    """Log at ERROR for 5xx, WARNING for 4xx and INFO for anything else."""
    extra = dict(attrs or {})
    if status >= 500:
        _logger.error(f"{prefix} failed", extra=extra)
    elif status >= 400:
        _logger.warning(f"{prefix} warning", extra=extra)
    else:
        _logger.info(f"{prefix} completed", extra=extra)


def _incoming(response: flask.Response, trace_id: str, elapsed: float) -> None:
    request = flask.request
    attrs = {
        "trace_id": trace_id,
        "http.response.status_code": response.status_code,
        "http.request.method": request.method,
        "http.route": request.path,
        "server.address": request.host,
        "http.response.latency": str(timedelta(seconds=elapsed)),
    }
    log_filtered_status_code(response.status_code, "incoming request", attrs)


def install(app: flask.Flask) -> flask.Flask:
    """Register the trace and logging hooks on ``app`` and return it."""

    @app.before_request
    def _start_request() -> None:
        setattr(flask.g, _STARTED, time.perf_counter())
        trace_id = flask.request.headers.get(TRACE_HEADER) or str(uuid.uuid4())
        setattr(flask.g, TRACE_HEADER, trace_id)

    @app.after_request
    def _finish_request(response: flask.Response) -> flask.Response:
        trace_id = flask.g.get(TRACE_HEADER, "")
        if trace_id:
            response.headers[TRACE_HEADER] = trace_id
        started = flask.g.get(_STARTED)
        elapsed = time.perf_counter() - started if started is not None else 0.0
        _incoming(response, trace_id, elapsed)
        return response

    return app