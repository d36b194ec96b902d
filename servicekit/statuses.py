"""Uniform JSON responses and redirects for Flask handlers."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import flask

from .codec import marshal

_CONTENT_TYPE = "application/json; charset=utf-8"


@dataclass
class Response:
    """The body of a JSON API response."""

    code: int
    message: str
    data: Any = None
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object, leaving out empty data and error."""
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        if self.error:
            body["error"] = self.error
        return body


def _json(status: HTTPStatus, message: str, data: Any = None, err: BaseException | str | None = None) -> flask.Response:
    body = Response(
        code=int(status),
        message=message,
        data=data,
        error="" if err is None else str(err),
    )
    return flask.Response(marshal(body.to_dict()), status=int(status), content_type=_CONTENT_TYPE)


def _redirect(status: HTTPStatus, location: str) -> flask.Response:
    return flask.redirect(location, code=int(status))


def status_ok(message: str, data: Any) -> flask.Response:
    return _json(HTTPStatus.OK, message, data=data)


def status_created(message: str, data: Any) -> flask.Response:
    return _json(HTTPStatus.CREATED, message, data=data)


def status_temporary_redirect(location: str) -> flask.Response:
    return _redirect(HTTPStatus.TEMPORARY_REDIRECT, location)


def status_permanent_redirect(location: str) -> flask.Response:
    return _redirect(HTTPStatus.PERMANENT_REDIRECT, location)


def status_found(location: str) -> flask.Response:
    return _redirect(HTTPStatus.FOUND, location)


def status_moved_permanently(location: str) -> flask.Response:
    return _redirect(HTTPStatus.MOVED_PERMANENTLY, location)


def status_bad_request(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.BAD_REQUEST, message, err=err)


def status_unauthorized(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.UNAUTHORIZED, message, err=err)


def status_forbidden(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.FORBIDDEN, message, err=err)


def status_not_found(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.NOT_FOUND, message, err=err)


def status_request_timeout(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.REQUEST_TIMEOUT, message, err=err)


def status_conflict(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.CONFLICT, message, err=err)


def status_unprocessable_entity(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.UNPROCESSABLE_ENTITY, message, err=err)


def status_too_many_requests(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.TOO_MANY_REQUESTS, message, err=err)


def status_internal_server_error(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.INTERNAL_SERVER_ERROR, message, err=err)


def status_bad_gateway(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.BAD_GATEWAY, message, err=err)


def status_service_unavailable(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.SERVICE_UNAVAILABLE, message, err=err)


def status_gateway_timeout(message: str, err: BaseException | str) -> flask.Response:
    return _json(HTTPStatus.GATEWAY_TIMEOUT, message, err=err)