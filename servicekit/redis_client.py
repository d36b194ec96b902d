"""Redis client construction from a plain connection description."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Union

import redis
from redis.backoff import NoBackoff
from redis.retry import Retry

Duration = Union[timedelta, float]


def _seconds(value: Duration) -> float:
    return value.total_seconds() if isinstance(value, timedelta) else float(value)


@dataclass
class RedisConnectionPool:
    """Pool settings; zero values leave the client library's defaults.

    ``min_idle_conns``, ``idle_timeout`` and ``max_conn_age`` are kept for
    completeness; the client library has no matching settings.
    """

    pool_size: int = 0
    min_idle_conns: int = 0
    max_retries: int = 0
    connect_timeout: Duration = 0.0
    read_timeout: Duration = 0.0
    write_timeout: Duration = 0.0
    pool_timeout: Duration = 0.0
    idle_timeout: Duration = 0.0
    max_conn_age: Duration = 0.0


@dataclass
class RedisConnection:
    """Where and how to connect to Redis."""

    host: str = ""
    port: int = 0
    password: str = ""
    database: int = 0
    connection_pool: RedisConnectionPool | None = None


def client_options(config: RedisConnection) -> dict[str, Any]:
    """Return the keyword arguments for ``redis.Redis`` described by ``config``."""
    options: dict[str, Any] = {
        "host": config.host,
        "port": config.port,
        "password": config.password or None,
        "db": config.database,
    }
    pool = config.connection_pool
    if pool is None:
        return options

    if pool.pool_size > 0:
        options["max_connections"] = pool.pool_size
    if pool.max_retries > 0:
        options["retry"] = Retry(NoBackoff(), pool.max_retries)
    connect_timeout = _seconds(pool.connect_timeout)
    if connect_timeout > 0:
        options["socket_connect_timeout"] = connect_timeout
    socket_timeout = max(_seconds(pool.read_timeout), _seconds(pool.write_timeout))
    if socket_timeout > 0:
        options["socket_timeout"] = socket_timeout
    return options


def new_redis_client(config: RedisConnection) -> redis.Redis:
    """Create a client and check it with a PING; raise ConnectionError on failure."""
    options = client_options(config)
    pool = config.connection_pool
    pool_timeout = _seconds(pool.pool_timeout) if pool is not None else 0.0
    if pool_timeout > 0:
        blocking_pool = redis.BlockingConnectionPool(timeout=pool_timeout, **options)
        client = redis.Redis(connection_pool=blocking_pool)
    else:
        client = redis.Redis(**options)

    try:
        client.ping()
    except redis.RedisError as exc:
        client.close()
        raise ConnectionError(f"failed to connect to Redis: {exc}") from exc
    return client