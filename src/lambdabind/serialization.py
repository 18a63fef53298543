from __future__ import annotations

from typing import Any

import msgspec

from .objectid import ObjectID


def _enc_hook(value: Any) -> Any:
    if isinstance(value, ObjectID):
        return value.hex()
    raise NotImplementedError(f"Objects of type {type(value).__name__} are not supported")


def _dec_hook(type_: Any, obj: Any) -> Any:
    if isinstance(type_, type) and issubclass(type_, ObjectID):
        if isinstance(obj, type_):
            return obj
        if isinstance(obj, str):
            return type_.from_hex(obj)
        raise TypeError(f"Expected `str`, got `{type(obj).__name__}`")
    raise NotImplementedError(f"Type {type_!r} is not supported")


_encoder = msgspec.json.Encoder(enc_hook=_enc_hook)


def json_encode(value: Any) -> bytes:
    """Serialize ``value`` to JSON bytes using msgspec."""

    return _encoder.encode(value)


def json_decode(data: bytes | str, type: Any = Any) -> Any:
    """Deserialize JSON ``data``, optionally validating it against ``type``."""

    return msgspec.json.decode(data, type=type, dec_hook=_dec_hook)


def convert(value: Any, type: Any) -> Any:
    """Convert already-decoded builtins into ``type``."""

    return msgspec.convert(value, type=type, dec_hook=_dec_hook)


def to_builtins(value: Any) -> Any:
    """Lower ``value`` to JSON-compatible builtins."""

    return msgspec.to_builtins(value, enc_hook=_enc_hook)


__all__ = ["convert", "json_decode", "json_encode", "to_builtins"]
