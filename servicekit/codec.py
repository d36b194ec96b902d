"""JSON encoding helpers with compact output and HTML-safe escaping."""

from __future__ import annotations

import dataclasses
import io
import json
from typing import IO, Any

_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_WHITESPACE = " \t\n\r"
_decoder = json.JSONDecoder()


def _default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _dumps(data: Any) -> str:
    text = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=_default)
    for char, escaped in _ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def marshal(data: Any) -> bytes:
    """Return the compact JSON encoding of ``data`` as UTF-8 bytes."""
    return _dumps(data).encode("utf-8")


def unmarshal(data: bytes | str) -> Any:
    """Parse a complete JSON document."""
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    return json.loads(data)


def encode(stream: IO, data: Any) -> None:
    """Write ``data`` to ``stream`` as JSON followed by a newline."""
    text = _dumps(data) + "\n"
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        stream.write(text.encode("utf-8"))
    else:
        stream.write(text)


def decode(stream: IO) -> Any:
    """Read the first JSON value from ``stream``; trailing content is ignored."""
    content = stream.read()
    if isinstance(content, (bytes, bytearray)):
        content = bytes(content).decode("utf-8")
    value, _ = _decoder.raw_decode(content.lstrip(_WHITESPACE))
    return value