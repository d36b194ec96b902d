# servicekit

Small building blocks for Python web services built on Flask, requests and redis.

## Installation

```
pip install servicekit
```

To run the tests:

```
pip install "servicekit[test]"
pytest
```

## Modules

- `servicekit.csrf` – stateless CSRF tokens of the form `<unix-timestamp>:<hmac-sha256-hex>`.
  `generate_secret()` returns 32 random bytes as hex, `generate_token(secret)` signs the
  current Unix time, and `verify_token(token, secret, max_age)` (max age as a `timedelta` or
  seconds) raises `InvalidFormatError`, `InvalidTimestampError`, `ExpiredTokenError` or
  `InvalidSignatureError`, all subclasses of `CSRFError` (itself a `ValueError`).
- `servicekit.codec` – compact JSON with `<`, `>` and `&` escaped: `marshal(data)` returns
  bytes, `unmarshal(data)` parses bytes or text, `encode(stream, data)` writes the document and
  a newline to a text or binary stream, `decode(stream)` reads the first JSON value from a
  stream. Dataclass instances are encoded as objects.
- `servicekit.jsonlog` – a levelled logger writing one JSON object per line with `timestamp`,
  `level`, `message` and, when present, `fields`. `JsonLogger` has `should_log(level)` and
  `log(level, msg, fields)`; `Level` runs `TRACE`, `DEBUG`, `INFO`, `WARN`, `ERROR`, `FATAL`.
  The module functions `trace`, `debug`, `info`, `warn`, `error` and `fatal` use a default
  logger (INFO level, standard output); `fatal` raises `SystemExit(1)` after writing.
  `init(msg)`, `set_fields(fields)`, `set_output(out)` and `set_level(name)` configure it;
  an unknown level name prints a warning to standard error and falls back to INFO.
  `get_default_logger()` and `set_default_logger(logger)` swap it out.
- `servicekit.statuses` – Flask responses: `Response` (`code`, `message`, `data`, `error`,
  with `to_dict()` leaving out empty `data` and `error`), JSON helpers such as `status_ok`,
  `status_created`, `status_bad_request`, `status_not_found`, `status_internal_server_error`,
  `status_gateway_timeout`, and redirects `status_found`, `status_moved_permanently`,
  `status_temporary_redirect`, `status_permanent_redirect`.
- `servicekit.httpclient` – `Client(session=None)` wraps a `requests.Session`;
  `outgoing_request(ctx, method, url, body, headers)` adds the `X-Trace-ID` found by
  `extract_trace_id(ctx)` (a mapping, `flask.g` or an object with `headers`; with `ctx=None`,
  the current Flask application context) and logs the outcome through the standard
  `logging` module.
- `servicekit.middleware` – `install(app)` registers Flask hooks that take the incoming
  `X-Trace-ID` or generate a UUID, store it on `flask.g`, echo it in the response header and
  log each request; `log_filtered_status_code(status, prefix, attrs)` logs 5xx at ERROR,
  4xx at WARNING and the rest at INFO.
- `servicekit.redis_client` – `RedisConnection` and `RedisConnectionPool` settings,
  `client_options(config)` giving the keyword arguments for `redis.Redis`, and
  `new_redis_client(config)`, which pings the server and raises `ConnectionError` on failure.
- `servicekit.postgres_config` – `Connection` and `ConnectionPool` settings;
  `set_defaults(connection)` fills unset values (`sslmode` `disable`, pool of 2 to 10,
  validation query `SELECT 1`, 3 attempts 3 seconds apart, and so on).
- `servicekit.postgres_retry` – `retry_connection(connect, validation_query, retry_attempts,
  retry_interval)` opens a pool, pings it, runs the validation query and retries, raising
  `ConnectionFailedError` when every attempt fails.
- `servicekit.postgres_database` – `build_dsn(config)` and `Database(config, connect)`, with
  `pool()` and `close()`, usable as a context manager.

## Examples

```python
from servicekit import csrf, jsonlog

signing = csrf.generate_secret()
issued = csrf.generate_token(signing)
csrf.verify_token(issued, signing, max_age=3600)

jsonlog.set_level("debug")
jsonlog.set_fields({"app": "orders"})
jsonlog.info("service started", {"port": 8080})
```

```python
from flask import Flask
from servicekit import middleware, statuses

app = Flask(__name__)
middleware.install(app)

@app.get("/items/<item_id>")
def get_item(item_id):
    return statuses.status_ok("found", {"id": item_id})
```

## What it does not do

- It ships no PostgreSQL driver. `Database` and `retry_connection` take a `connect` callable
  that you supply; the pool it returns must offer `ping()`, `query_row(query)` and `close()`.
- The Redis settings `min_idle_conns`, `idle_timeout` and `max_conn_age` are accepted but
  not applied, as the redis client has no matching options.
- There is no command-line program or server of its own; the pieces are meant to be used
  inside your Flask application.