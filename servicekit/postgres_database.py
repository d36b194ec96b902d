"""A PostgreSQL pool opened from connection settings, with defaults and retries."""

from __future__ import annotations

import dataclasses
from typing import Any, Callable

from .postgres_config import Connection, set_defaults
from .postgres_retry import ConnectionFailedError, retry_connection


def build_dsn(config: Connection) -> str:
    """Return the key/value connection string for ``config``."""
    return (
        f"host={config.host} port={config.port} user={config.username} "
        f"password={config.password} dbname={config.database} sslmode={config.ssl_mode}"
    )


class Database:
    """Owns a connection pool opened by ``connect(dsn, before_acquire)``."""

    def __init__(self, config: Connection, connect: Callable[[str, Callable[[Any], bool]], Any]) -> None:
        config = set_defaults(dataclasses.replace(config))
        self.config = config
        dsn = build_dsn(config)
        pool_settings = config.connection_pool
        try:
            self._pool = retry_connection(
                lambda before_acquire: connect(dsn, before_acquire),
                pool_settings.validation_query,
                pool_settings.retry_attempts,
                pool_settings.retry_interval,
            )
        except ConnectionFailedError as exc:
            raise ConnectionError(f"connect to database: {exc}") from exc

    def close(self) -> None:
        """Close the pool."""
        if self._pool is not None:
            self._pool.close()

    def pool(self) -> Any:
        """Return the underlying pool."""
        return self._pool

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()