"""Request primitives."""

from __future__ import annotations

import base64
import binascii
from types import MappingProxyType
from typing import Any, Iterable, Mapping, TypeVar
from urllib.parse import parse_qsl

import msgspec

from .coercion import SourceKind, SourceValues
from .exceptions import BodyError, HTTPError
from .http import Status
from .serialization import convert, json_decode, json_encode

T = TypeVar("T")

class ProxyEvent(msgspec.Struct, rename="camel"):
    """The parts of an API Gateway proxy event this library reads."""

    http_method: str = "GET"
    path: str = "/"
    path_parameters: dict[str, str] | None = None
    query_string_parameters: dict[str, str] | None = None
    multi_value_query_string_parameters: dict[str, list[str]] | None = None
    headers: dict[str, str] | None = None
    multi_value_headers: dict[str, list[str]] | None = None
    body: str | None = None
    is_base64_encoded: bool = False


def _split_occurrences(
    pairs: Iterable[tuple[str, str]],
) -> tuple[Mapping[str, str], Mapping[str, tuple[str, ...]]]:
    multi: dict[str, list[str]] = {}
    for key, value in pairs:
        multi.setdefault(key, []).append(value)
    single = {key: values[0] for key, values in multi.items() if len(values) == 1}
    return single, {key: tuple(values) for key, values in multi.items()}


def decode_base64_body(body: bytes) -> bytes:
    """Strip base64 wrapping from a body; line breaks inside the payload are ignored."""

    try:
        return base64.b64decode(body.replace(b"\r", b"").replace(b"\n", b""), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BodyError(f"failed decoding body: {exc}") from exc


def _freeze_multi(values: Mapping[str, Iterable[str]] | None) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({key: tuple(items) for key, items in (values or {}).items()})


class Request:
    """Immutable view of the path, query, header and body data of one request.

    Query parameters and headers are exposed both single-valued and
    multi-valued. The two views are built independently and are only
    guaranteed to agree for keys that occur exactly once. Header names are
    matched exactly; no canonicalisation is applied.
    """

    __slots__ = (
        "_body",
        "_json_cache",
        "headers",
        "is_base64_encoded",
        "method",
        "multi_headers",
        "multi_query_params",
        "path",
        "path_params",
        "query_params",
    )

    def __init__(
        self,
        *,
        method: str = "GET",
        path: str = "/",
        path_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, str] | None = None,
        multi_query_params: Mapping[str, Iterable[str]] | None = None,
        query_string: str | None = None,
        headers: Mapping[str, str] | None = None,
        multi_headers: Mapping[str, Iterable[str]] | None = None,
        header_pairs: Iterable[tuple[str, str]] | None = None,
        body: bytes | str | None = None,
        is_base64_encoded: bool = False,
    ) -> None:
        self.method = method.upper()
        self.path = path
        self.path_params: Mapping[str, str] = MappingProxyType(dict(path_params or {}))

        single_query: dict[str, str] = {}
        multi_query: dict[str, tuple[str, ...]] = {}
        if query_string:
            derived_single, derived_multi = _split_occurrences(
                parse_qsl(query_string, keep_blank_values=True)
            )
            single_query.update(derived_single)
            multi_query.update(derived_multi)
        single_query.update(query_params or {})
        multi_query.update(_freeze_multi(multi_query_params))
        self.query_params: Mapping[str, str] = MappingProxyType(single_query)
        self.multi_query_params: Mapping[str, tuple[str, ...]] = MappingProxyType(multi_query)

        single_headers: dict[str, str] = {}
        multi_header_values: dict[str, tuple[str, ...]] = {}
        if header_pairs is not None:
            derived_single, derived_multi = _split_occurrences(header_pairs)
            single_headers.update(derived_single)
            multi_header_values.update(derived_multi)
        single_headers.update(headers or {})
        multi_header_values.update(_freeze_multi(multi_headers))
        self.headers: Mapping[str, str] = MappingProxyType(single_headers)
        self.multi_headers: Mapping[str, tuple[str, ...]] = MappingProxyType(multi_header_values)

        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body or b""
        self.is_base64_encoded = bool(is_base64_encoded)
        self._json_cache: Any = msgspec.UNSET

    def __setattr__(self, name: str, value: Any) -> None:
        if name != "_json_cache" and hasattr(self, name):
            raise AttributeError(f"Request.{name} is read-only")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        return f"Request(method={self.method!r}, path={self.path!r})"

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> "Request":
        """Build a request from an API Gateway proxy event mapping."""

        try:
            parsed = convert(event, ProxyEvent)
        except msgspec.ValidationError as exc:
            raise HTTPError(Status.BAD_REQUEST, f"invalid request event: {exc}") from exc
        return cls(
            method=parsed.http_method,
            path=parsed.path,
            path_params=parsed.path_parameters,
            query_params=parsed.query_string_parameters,
            multi_query_params=parsed.multi_value_query_string_parameters,
            headers=parsed.headers,
            multi_headers=parsed.multi_value_headers,
            body=parsed.body,
            is_base64_encoded=parsed.is_base64_encoded,
        )

    @property
    def body(self) -> bytes:
        """The body exactly as received, still base64-wrapped when flagged."""

        return self._body

    def lookup(self, kind: SourceKind, key: str) -> SourceValues:
        """Return the raw values stored under ``key`` for ``kind``."""

        if kind is SourceKind.PATH:
            return SourceValues(self.path_params.get(key))
        if kind is SourceKind.QUERY:
            return SourceValues(self.query_params.get(key), self.multi_query_params.get(key))
        if kind is SourceKind.HEADER:
            return SourceValues(self.headers.get(key), self.multi_headers.get(key))
        raise ValueError(f"{kind!r} values are not looked up by key")

    def header(self, name: str, default: str | None = None) -> str | None:
        value = self.lookup(SourceKind.HEADER, name)
        if value.single is None and not value.multi:
            return default
        return value.scalar()

    def query(self, name: str, default: str | None = None) -> str | None:
        value = self.lookup(SourceKind.QUERY, name)
        if value.single is None and not value.multi:
            return default
        return value.scalar()

    def raw_body(self) -> bytes:
        """Return the body with any base64 wrapping removed."""

        if not self.is_base64_encoded:
            return self._body
        return decode_base64_body(self._body)

    def text(self) -> str:
        return self.raw_body().decode()

    def json(self, model: type[T] | None = None) -> T | Any:
        """Decode the JSON body using :mod:`msgspec`."""

        if self._json_cache is msgspec.UNSET:
            payload = self.raw_body()
            if not payload:
                self._json_cache = None
            else:
                try:
                    self._json_cache = json_decode(payload)
                except msgspec.DecodeError as exc:
                    raise BodyError(f"invalid request body: {exc}") from exc
        if model is None:
            return self._json_cache
        try:
            return convert(self._json_cache, model)
        except msgspec.ValidationError as exc:
            raise BodyError(f"invalid request body: {exc}") from exc

    def unmarshal(self, target: T, *, body: bool = False) -> T:
        from .binding import unmarshal_request

        return unmarshal_request(self, target, body=body)

    def decode(self, model: type[T], *, body: bool = False) -> T:
        from .binding import decode_request

        return decode_request(self, model, body=body)


def marshal_request(value: Any, **kwargs: Any) -> Request:
    """Encode ``value`` as JSON and return a request carrying it as the body."""

    return Request(body=json_encode(value), **kwargs)


__all__ = ["ProxyEvent", "Request", "decode_base64_body", "marshal_request"]
