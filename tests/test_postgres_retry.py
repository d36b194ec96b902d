import io
import json
from unittest import mock

import pytest

from servicekit import jsonlog
from servicekit.postgres_retry import ConnectionFailedError, retry_connection


class FakePool:
    def __init__(self, ping_error=None, query_error=None):
        self.ping_error = ping_error
        self.query_error = query_error
        self.closed = False
        self.queries = []

    def ping(self):
        if self.ping_error:
            raise self.ping_error

    def query_row(self, query):
        self.queries.append(query)
        if self.query_error:
            raise self.query_error
        return 1

    def close(self):
        self.closed = True


class Connector:
    """Hands out the given outcomes in order; exceptions are raised."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.hooks = []

    def __call__(self, hook):
        self.hooks.append(hook)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def log_buffer():
    original = jsonlog.get_default_logger()
    buffer = io.StringIO()
    jsonlog.set_default_logger(jsonlog.JsonLogger(jsonlog.Level.TRACE, out=buffer))
    yield buffer
    jsonlog.set_default_logger(original)


def _entries(buffer):
    return [json.loads(line) for line in buffer.getvalue().splitlines()]


def test_first_attempt_succeeds(log_buffer):
    pool = FakePool()
    connector = Connector(pool)
    result = retry_connection(connector, "SELECT 1", 3, 0)
    assert result is pool
    assert pool.queries == ["SELECT 1"]
    assert len(connector.hooks) == 1
    assert log_buffer.getvalue() == ""


def test_retries_until_connect_succeeds(log_buffer):
    pool = FakePool()
    connector = Connector(OSError("down"), OSError("down"), pool)
    assert retry_connection(connector, "SELECT 1", 3, 0) is pool
    retries = [e for e in _entries(log_buffer) if e["message"] == "Retrying database connection"]
    assert [e["fields"]["attempt"] for e in retries] == [2, 3]
    assert all(e["fields"]["totalAttempts"] == 3 for e in retries)


def test_sleeps_between_attempts(log_buffer):
    pool = FakePool()
    connector = Connector(OSError("down"), OSError("down"), pool)
    with mock.patch("time.sleep") as sleep:
        result = retry_connection(connector, "SELECT 1", 3, 0.25)
    assert result is pool
    assert sleep.call_args_list == [mock.call(0.25), mock.call(0.25)]


def test_all_attempts_fail(log_buffer):
    failure = OSError("refused")
    connector = Connector(failure, failure, failure)
    with pytest.raises(ConnectionFailedError, match="after 3 attempts") as info:
        retry_connection(connector, "SELECT 1", 3, 0)
    assert info.value.attempts == 3
    assert info.value.last_error is failure
    assert info.value.__cause__ is None or info.value.__cause__ is failure


def test_zero_attempts_never_connects(log_buffer):
    connector = Connector()
    with pytest.raises(ConnectionFailedError):
        retry_connection(connector, "SELECT 1", 0, 0)
    assert connector.hooks == []


def test_ping_failure_closes_pool_and_retries(log_buffer):
    bad = FakePool(ping_error=OSError("no ping"))
    good = FakePool()
    assert retry_connection(Connector(bad, good), "SELECT 1", 2, 0) is good
    assert bad.closed
    assert not good.closed
    messages = [e["message"] for e in _entries(log_buffer)]
    assert "Ping failed during database connection attempt" in messages


def test_validation_failure_closes_pool(log_buffer):
    bad = FakePool(query_error=RuntimeError("bad query"))
    with pytest.raises(ConnectionFailedError) as info:
        retry_connection(Connector(bad), "SELECT 1", 1, 0)
    assert bad.closed
    assert str(info.value.last_error) == "bad query"
    entry = _entries(log_buffer)[0]
    assert entry["level"] == "ERROR"
    assert entry["fields"]["query"] == "SELECT 1"


def test_before_acquire_hook_validates_connections(log_buffer):
    connector = Connector(FakePool())
    retry_connection(connector, "SELECT 1", 1, 0)
    hook = connector.hooks[0]
    healthy = FakePool()
    assert hook(healthy) is True
    assert healthy.queries == ["SELECT 1"]
    assert hook(FakePool(query_error=RuntimeError("gone"))) is False
    entry = _entries(log_buffer)[-1]
    assert entry["message"] == "validation query failed"
    assert entry["fields"]["error"] == "gone"