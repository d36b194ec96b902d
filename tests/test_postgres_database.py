import io

import pytest

from servicekit import jsonlog
from servicekit.postgres_config import Connection, ConnectionPool
from servicekit.postgres_database import Database, build_dsn
from servicekit.postgres_retry import ConnectionFailedError


class FakePool:
    def __init__(self, fail_query=False):
        self.fail_query = fail_query
        self.close_calls = 0
        self.queries = []

    def ping(self):
        pass

    def query_row(self, query):
        self.queries.append(query)
        if self.fail_query:
            raise RuntimeError("query failed")
        return 1

    def close(self):
        self.close_calls += 1


class Recorder:
    def __init__(self, pool):
        self.pool = pool
        self.dsns = []

    def __call__(self, dsn, before_acquire):
        self.dsns.append(dsn)
        return self.pool


@pytest.fixture(autouse=True)
def quiet_log():
    original = jsonlog.get_default_logger()
    jsonlog.set_default_logger(jsonlog.JsonLogger(jsonlog.Level.TRACE, out=io.StringIO()))
    yield
    jsonlog.set_default_logger(original)


def _config(**overrides):
    password = "password"
    settings = dict(
        host="localhost",
        port=5432,
        username="user",
        password=password,
        database="db",
    )
    settings.update(overrides)
    return Connection(**settings)


def test_build_dsn_uses_all_fields():
    config = _config(ssl_mode="disable")
    assert build_dsn(config) == (
        "host=localhost port=5432 user=user password=password dbname=db sslmode=disable"
    )


def test_database_opens_pool_with_defaults():
    pool = FakePool()
    connect = Recorder(pool)
    original = _config()
    db = Database(original, connect)
    assert db.pool() is pool
    assert db.config.ssl_mode == "disable"
    assert connect.dsns == [build_dsn(db.config)]
    assert pool.queries == [db.config.connection_pool.validation_query]
    assert original.ssl_mode == ""


def test_database_uses_configured_validation_query():
    pool = FakePool()
    config = _config(connection_pool=ConnectionPool(validation_query="SELECT now()"))
    Database(config, Recorder(pool))
    assert pool.queries == ["SELECT now()"]


def test_close_closes_pool():
    pool = FakePool()
    db = Database(_config(), Recorder(pool))
    db.close()
    assert pool.close_calls == 1


def test_context_manager_closes_pool():
    pool = FakePool()
    with Database(_config(), Recorder(pool)) as db:
        assert db.pool() is pool
    assert pool.close_calls == 1


def test_connection_failure_raises():
    pool = FakePool(fail_query=True)
    config = _config(connection_pool=ConnectionPool(retry_attempts=1))
    with pytest.raises(ConnectionError, match="^connect to database: ") as info:
        Database(config, Recorder(pool))
    assert isinstance(info.value.__cause__, ConnectionFailedError)
    assert pool.close_calls == 1