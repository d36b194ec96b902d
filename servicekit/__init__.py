"""Building blocks for web services: CSRF tokens, JSON logging, Flask responses and hooks, a traced HTTP client, Redis and PostgreSQL helpers."""

__version__ = "0.1.0"