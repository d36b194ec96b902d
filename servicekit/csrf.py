"""Stateless CSRF tokens: a Unix timestamp signed with HMAC-SHA256."""

from __future__ import annotations

import hashlib
import hmac
import re
import secrets
import time
from datetime import timedelta

_SECRET_BYTES = 32
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")


class CSRFError(ValueError):
    """Base class for CSRF token verification failures."""

    default_message = "invalid CSRF token"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidFormatError(CSRFError):
    """The token is not of the form ``timestamp:signature``."""

    default_message = "invalid CSRF token format"


class ExpiredTokenError(CSRFError):
    """The token is older than the allowed maximum age."""

    default_message = "CSRF token has expired"


class InvalidSignatureError(CSRFError):
    """The token's signature does not match the secret."""

    default_message = "CSRF token signature is invalid"


class InvalidTimestampError(CSRFError):
    """The token's timestamp is not a valid 64-bit integer."""

    default_message = "invalid timestamp in CSRF token"


def _sign(message: str, secret: str) -> str:
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def generate_token(secret: str) -> str:
    """Return a token made of the current Unix time and its HMAC signature."""
    message = str(int(time.time()))
    return f"{message}:{_sign(message, secret)}"


def generate_secret() -> str:
    """Return a fresh random secret of 32 bytes, hex encoded."""
    return secrets.token_hex(_SECRET_BYTES)


def _parse_timestamp(text: str) -> int:
    if not _DECIMAL.fullmatch(text):
        raise InvalidTimestampError(
            f"{InvalidTimestampError.default_message}: invalid syntax {text!r}"
        )
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidTimestampError(
            f"{InvalidTimestampError.default_message}: value out of range {text!r}"
        )
    return value


def verify_token(token: str, secret: str, max_age: timedelta | float) -> None:
    """Check a token's age and signature, raising a CSRFError if it is not valid.

    ``max_age`` is a timedelta or a number of seconds.
    """
    parts = token.split(":")
    if len(parts) != 2:
        raise InvalidFormatError()
    timestamp_text, signature = parts

    timestamp = _parse_timestamp(timestamp_text)

    limit = max_age.total_seconds() if isinstance(max_age, timedelta) else float(max_age)
    if time.time() - timestamp > limit:
        raise ExpiredTokenError()

    expected = _sign(str(timestamp), secret)
    if not hmac.compare_digest(signature.encode(), expected.encode()):
        raise InvalidSignatureError()