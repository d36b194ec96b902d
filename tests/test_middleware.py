import logging
import uuid

import flask
import pytest

from servicekit.middleware import install, log_filtered_status_code

TRACE_HEADER = "X-Trace-ID"


def _records(caplog):
    return [r for r in caplog.records if r.name == "servicekit.middleware"]


@pytest.fixture
def app():
    application = flask.Flask(__name__)
    install(application)

    @application.get("/test")
    def ok():
        return flask.g.get(TRACE_HEADER, ""), 200

    @application.get("/boom")
    def boom():
        return "boom", 500

    return application


@pytest.mark.parametrize(
    "status, level, message",
    [
        (503, logging.ERROR, "test failed"),
        (404, logging.WARNING, "test warning"),
        (200, logging.INFO, "test completed"),
    ],
)
def test_log_filtered_status_code(caplog, status, level, message):
    caplog.set_level(logging.INFO, logger="servicekit.middleware")
    log_filtered_status_code(status, "test", None)
    records = _records(caplog)
    assert len(records) == 1
    assert records[0].levelno == level
    assert records[0].getMessage() == message


def test_log_filtered_status_code_keeps_attributes(caplog):
    caplog.set_level(logging.INFO, logger="servicekit.middleware")
    log_filtered_status_code(200, "req", {"trace_id": "t-1"})
    assert _records(caplog)[0].trace_id == "t-1"


def test_middleware_without_trace_id(app):
    resp = app.test_client().get("/test")
    assert resp.status_code == 200
    trace_id = resp.headers[TRACE_HEADER]
    assert str(uuid.UUID(trace_id)) == trace_id
    assert resp.get_data(as_text=True) == trace_id


def test_middleware_with_existing_trace_id(app):
    existing = str(uuid.uuid4())
    resp = app.test_client().get("/test", headers={TRACE_HEADER: existing})
    assert resp.status_code == 200
    assert resp.headers[TRACE_HEADER] == existing


def test_middleware_logs_incoming_request(app, caplog):
    caplog.set_level(logging.INFO, logger="servicekit.middleware")
    app.test_client().get("/test", headers={TRACE_HEADER: "trace-1"})
    records = _records(caplog)
    assert len(records) == 1
    record = records[0]
    assert record.getMessage() == "incoming request completed"
    assert record.trace_id == "trace-1"
    assert getattr(record, "http.request.method") == "GET"
    assert getattr(record, "http.route") == "/test"
    assert getattr(record, "http.response.status_code") == 200


def test_middleware_logs_server_error_as_error(app, caplog):
    caplog.set_level(logging.INFO, logger="servicekit.middleware")
    resp = app.test_client().get("/boom")
    assert resp.status_code == 500
    records = _records(caplog)
    assert [r.levelno for r in records] == [logging.ERROR]
    assert records[0].getMessage() == "incoming request failed"


def test_middleware_logs_not_found_as_warning(app, caplog):
    caplog.set_level(logging.INFO, logger="servicekit.middleware")
    resp = app.test_client().get("/missing")
    assert resp.status_code == 404
    assert resp.headers[TRACE_HEADER]
    records = _records(caplog)
    assert [r.levelno for r in records] == [logging.WARNING]