"""Connect to a database pool, validating it and retrying on failure."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Any, Callable, Protocol, Union

from . import jsonlog

Duration = Union[timedelta, float]


class _Queryable(Protocol):
    def query_row(self, query: str) -> Any: ...


class _Pool(_Queryable, Protocol):
    def ping(self) -> None: ...

    def close(self) -> None: ...


class ConnectionFailedError(ConnectionError):
    """Every connection attempt failed."""

    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        super().__init__(f"failed to connect to database after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


def _seconds(value: Duration) -> float:
    return value.total_seconds() if isinstance(value, timedelta) else float(value)


def retry_connection(
    connect: Callable[[Callable[[_Queryable], bool]], _Pool],
    validation_query: str,
    retry_attempts: int,
    retry_interval: Duration,
) -> _Pool:
    """Open a pool with ``connect`` and check it, trying up to ``retry_attempts`` times.

    ``connect`` receives a hook that validates a connection before it is handed
    out; it returns a pool offering ``ping()``, ``query_row(query)`` and ``close()``.
    """
    interval = _seconds(retry_interval)

    def before_acquire(conn: _Queryable) -> bool:
        try:
            conn.query_row(validation_query)
        except Exception as exc:
            jsonlog.error("validation query failed", {"error": str(exc), "query": validation_query})
            return False
        return True

    last_error: BaseException | None = None
    for attempt in range(retry_attempts):
        number = attempt + 1
        if attempt > 0:
            jsonlog.warn(
                "Retrying database connection",
                {"attempt": number, "totalAttempts": retry_attempts, "error": str(last_error)},
            )
            time.sleep(interval)

        try:
            pool = connect(before_acquire)
        except Exception as exc:
            last_error = exc
            continue

        try:
            pool.ping()
        except Exception as exc:
            pool.close()
            last_error = exc
            jsonlog.error(
                "Ping failed during database connection attempt",
                {"attempt": number, "totalAttempts": retry_attempts, "error": str(exc)},
            )
            continue

        try:
            pool.query_row(validation_query)
        except Exception as exc:
            pool.close()
            last_error = exc
            jsonlog.error(
                "Validation query failed during database connection attempt",
                {
                    "attempt": number,
                    "totalAttempts": retry_attempts,
                    "error": str(exc),
                    "query": validation_query,
                },
            )
            continue

        return pool

    raise ConnectionFailedError(retry_attempts, last_error)