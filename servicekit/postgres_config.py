"""PostgreSQL connection settings and their defaults."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from . import jsonlog


@dataclass
class ConnectionPool:
    """Pool settings; zero values are replaced by ``set_defaults``."""

    min_pool_size: int = 0
    max_pool_size: int = 0
    max_connection_idle_time: timedelta = timedelta(0)
    max_connection_lifetime: timedelta = timedelta(0)
    connection_timeout: timedelta = timedelta(0)
    validation_query: str = ""
    retry_attempts: int = 0
    retry_interval: timedelta = timedelta(0)


@dataclass
class Connection:
    """PostgreSQL connection parameters."""

    host: str = ""
    port: int = 0
    username: str = ""
    password: str = ""
    database: str = ""
    ssl_mode: str = ""
    connection_pool: ConnectionPool | None = None


def _set_pool_defaults(pool: ConnectionPool) -> None:
    if not pool.validation_query:
        pool.validation_query = "SELECT 1"
    if not pool.min_pool_size:
        pool.min_pool_size = 2
    if not pool.max_pool_size:
        pool.max_pool_size = 10
    if not pool.max_connection_idle_time:
        pool.max_connection_idle_time = timedelta(seconds=30)
    if not pool.max_connection_lifetime:
        pool.max_connection_lifetime = timedelta(seconds=90)
    if not pool.connection_timeout:
        pool.connection_timeout = timedelta(seconds=5)
    if not pool.retry_attempts:
        pool.retry_attempts = 3
    if not pool.retry_interval:
        pool.retry_interval = timedelta(seconds=3)


def set_defaults(connection: Connection) -> Connection:
    """Fill unset fields of ``connection`` in place and return it."""
    if connection.connection_pool is None:
        jsonlog.warn("ConnectionPool is unset, using default settings", None)
        connection.connection_pool = ConnectionPool()
    if not connection.ssl_mode:
        connection.ssl_mode = "disable"
    _set_pool_defaults(connection.connection_pool)
    return connection