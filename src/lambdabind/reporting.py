"""Rendering of errors into client-facing ``(status, message)`` pairs."""

from __future__ import annotations

import logging

from .config import BindConfig
from .exceptions import HTTPError
from .http import Status, is_server_error, reason_phrase

logger = logging.getLogger(__name__)


class ErrorReporter:
    """Map exceptions to the status and message a client is shown.

    :class:`HTTPError` instances keep their own status. Everything else is an
    unclassified failure rendered as ``500``. Messages of any 5xx error are
    replaced with the reason phrase unless the configuration exposes them.
    """

    __slots__ = ("config",)

    def __init__(self, config: BindConfig | None = None) -> None:
        self.config = config or BindConfig()

    def redact(self, status: int, message: str) -> str:
        if is_server_error(status) and not self.config.expose_server_errors:
            return reason_phrase(status)
        return message

    def to_client_error(self, exc: BaseException) -> tuple[int, str]:
        if isinstance(exc, HTTPError):
            status, message = exc.status, exc.message
        else:
            status, message = int(Status.INTERNAL_SERVER_ERROR), str(exc)
            logger.error("unhandled error while processing request", exc_info=exc)
        return status, self.redact(status, message)

    def to_http_error(self, exc: BaseException) -> HTTPError:
        status, message = self.to_client_error(exc)
        return HTTPError(status, message)


_default_reporter = ErrorReporter()


def configure(config: BindConfig) -> ErrorReporter:
    """Install the process-wide reporter; call once during startup."""

    global _default_reporter
    _default_reporter = ErrorReporter(config)
    return _default_reporter


def default_reporter() -> ErrorReporter:
    return _default_reporter


def to_client_error(exc: BaseException) -> tuple[int, str]:
    return _default_reporter.to_client_error(exc)


__all__ = ["ErrorReporter", "configure", "default_reporter", "to_client_error"]
