"""Library exception types."""

from __future__ import annotations

from typing import Any

from .http import Status, ensure_status


class LambdaBindError(Exception):
    """Base error type."""


class HTTPError(LambdaBindError):
    """Error carrying the HTTP status it should be rendered with."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(status, message)
        self.status = ensure_status(status)
        self.message = message

    def __str__(self) -> str:
        return f"error {self.status}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "message": self.message}

    def to_response_body(self) -> bytes:
        from .serialization import json_encode

        return json_encode(self.to_dict())


class DescriptorError(HTTPError):
    """A record type carries a malformed binding annotation."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(Status.BAD_REQUEST, message)
        self.field = field


class FieldError(HTTPError):
    """A request value could not be coerced into its field's declared type."""

    def __init__(self, key: str, message: str, *, field: str | None = None) -> None:
        super().__init__(Status.BAD_REQUEST, message)
        self.key = key
        self.field = field


class BodyError(HTTPError):
    """The request body could not be decoded or merged."""

    def __init__(self, message: str, *, status: int = Status.BAD_REQUEST) -> None:
        super().__init__(status, message)


__all__ = ["BodyError", "DescriptorError", "FieldError", "HTTPError", "LambdaBindError"]
