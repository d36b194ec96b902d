"""An HTTP client that forwards trace IDs and logs every outgoing request."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, Mapping
from urllib.parse import urlsplit

import flask
import requests

TRACE_HEADER = "X-Trace-ID"

_logger = logging.getLogger(__name__)


def extract_trace_id(ctx: Any) -> str:
    """Find the trace ID carried by ``ctx``, or an empty string.

    ``ctx`` may be a mapping or ``flask.g`` holding the ID under ``X-Trace-ID``,
    or a request whose headers carry it. With no ``ctx``, the current Flask
    application context is searched, if there is one.
    """
    if ctx is None:
        if not flask.has_app_context():
            return ""
        ctx = flask.g

    getter = getattr(ctx, "get", None)
    if callable(getter):
        value = getter(TRACE_HEADER)
        if isinstance(value, str):
            return value

    headers = getattr(ctx, "headers", None)
    if headers is not None:
        value = headers.get(TRACE_HEADER)
        if isinstance(value, str):
            return value
    return ""


def _log_outgoing(
    method: str,
    url: str,
    trace_id: str,
    elapsed: float,
    response: requests.Response | None,
    error: BaseException | None,
) -> None:
    parts = urlsplit(url)
    attrs: dict[str, Any] = {
        "trace_id": trace_id,
        "http.request.method": method,
        "http.route": parts.path,
        "server.address": parts.netloc,
        "http.response.latency": str(timedelta(seconds=elapsed)),
    }
    if error is not None:
        if response is not None and response.status_code >= 400:
            attrs["http.response.status_code"] = response.status_code
        attrs["error"] = str(error)
        _logger.error("outgoing request failed", extra=attrs)
        return
    if response is not None:
        attrs["http.response.status_code"] = response.status_code
    _logger.info("outgoing request completed", extra=attrs)


class Client:
    """Wraps a ``requests.Session`` with trace propagation and request logging."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def outgoing_request(
        self,
        ctx: Any,
        method: str,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> requests.Response:
        """Send a request, adding the trace ID found in ``ctx`` as a header."""
        request_headers = dict(headers or {})
        trace_id = extract_trace_id(ctx)
        if trace_id:
            request_headers[TRACE_HEADER] = trace_id

        start = time.perf_counter()
        try:
            response = self.session.request(method, url, data=body, headers=request_headers)
        except requests.RequestException as exc:
            _log_outgoing(method, url, trace_id, time.perf_counter() - start, exc.response, exc)
            raise
        _log_outgoing(method, url, trace_id, time.perf_counter() - start, response, None)
        return response