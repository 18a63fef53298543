"""Process configuration."""

from __future__ import annotations

import os
from typing import Mapping

from msgspec import Struct

from .scalars import is_truthy

EXPOSE_SERVER_ERRORS_ENV = "LAMBDABIND_EXPOSE_SERVER_ERRORS"


class BindConfig(Struct, frozen=True):
    """Typed configuration read once at startup.

    ``expose_server_errors`` controls whether errors rendered with a 5xx status
    keep their real message or are replaced by the status reason phrase.
    """

    expose_server_errors: bool = True

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "BindConfig":
        source = os.environ if env is None else env
        raw = source.get(EXPOSE_SERVER_ERRORS_ENV)
        if raw is None:
            return cls()
        return cls(expose_server_errors=is_truthy(raw.strip()))


__all__ = ["BindConfig", "EXPOSE_SERVER_ERRORS_ENV"]
