"""Response primitives for API Gateway proxy integrations."""

from __future__ import annotations

import base64
import logging
from typing import Any, Mapping, TypeVar

import msgspec

from .exceptions import HTTPError
from .http import Status
from .reporting import ErrorReporter, default_reporter
from .serialization import json_decode, json_encode, to_builtins

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTENT_TYPE_KEY = "Content-Type"
JSON_CONTENT_TYPE = "application/json; charset=UTF-8"
_ENCODING_FAILURE_BODY = '{"status":500,"message":"the server has encountered an unexpected error"}'


class Response(
    msgspec.Struct,
    kw_only=True,
    rename={
        "status_code": "statusCode",
        "multi_headers": "multiValueHeaders",
        "is_base64_encoded": "isBase64Encoded",
    },
):
    """Proxy integration response."""

    status_code: int = int(Status.OK)
    headers: dict[str, str] = {}
    multi_headers: dict[str, list[str]] = {}
    body: str = ""
    is_base64_encoded: bool = False

    def to_event(self) -> dict[str, Any]:
        """Return the mapping a Lambda handler hands back to API Gateway."""

        return to_builtins(self)

    def raw_body(self) -> bytes:
        if self.is_base64_encoded:
            return base64.b64decode(self.body)
        return self.body.encode("utf-8")


def _with_content_type(headers: Mapping[str, str] | None, content_type: str) -> dict[str, str]:
    combined = dict(headers or {})
    combined[CONTENT_TYPE_KEY] = content_type
    return combined


def custom_response(status: int, headers: Mapping[str, str] | None, data: Any) -> Response:
    """Encode ``data`` as JSON and wrap it in a response with ``status``."""

    try:
        body = json_encode(data).decode("utf-8")
    except (TypeError, NotImplementedError, msgspec.EncodeError) as exc:
        logger.error("failed encoding response body", exc_info=exc)
        status = int(Status.INTERNAL_SERVER_ERROR)
        body = _ENCODING_FAILURE_BODY
    return Response(
        status_code=int(status),
        headers=_with_content_type(headers, JSON_CONTENT_TYPE),
        body=body,
    )


def success_response(data: Any) -> Response:
    return custom_response(Status.OK, None, data)


def empty_response() -> Response:
    return custom_response(Status.OK, None, {})


def file_response(content_type: str, headers: Mapping[str, str] | None, data: bytes) -> Response:
    """Return text file contents verbatim; binary files should use :func:`file_b64_response`."""

    return Response(
        headers=_with_content_type(headers, content_type),
        body=data.decode("utf-8"),
    )


def file_b64_response(content_type: str, headers: Mapping[str, str] | None, data: bytes) -> Response:
    return Response(
        headers=_with_content_type(headers, content_type),
        body=base64.b64encode(data).decode("ascii"),
        is_base64_encoded=True,
    )


def error_response(exc: BaseException, reporter: ErrorReporter | None = None) -> Response:
    """Render ``exc`` as ``{"status": ..., "message": ...}`` with its status code."""

    error = (reporter or default_reporter()).to_http_error(exc)
    return custom_response(error.status, None, error.to_dict())


def status_and_error_response(
    status: int, exc: BaseException, reporter: ErrorReporter | None = None
) -> Response:
    """Render ``exc`` with an explicit ``status`` regardless of its own."""

    message = exc.message if isinstance(exc, HTTPError) else str(exc)
    redacted = (reporter or default_reporter()).redact(status, message)
    return custom_response(status, None, HTTPError(status, redacted).to_dict())


def unmarshal_response(response: Response, model: type[T]) -> T:
    """Decode a response body into ``model``; mostly useful in tests."""

    return json_decode(response.raw_body(), type=model)


__all__ = [
    "CONTENT_TYPE_KEY",
    "JSON_CONTENT_TYPE",
    "Response",
    "custom_response",
    "empty_response",
    "error_response",
    "file_b64_response",
    "file_response",
    "status_and_error_response",
    "success_response",
    "unmarshal_response",
]
