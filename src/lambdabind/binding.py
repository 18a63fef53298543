"""Declarative binding of request data onto typed records.

A record is a mutable :class:`msgspec.Struct` or a dataclass. Fields opt into
path, query or header binding with a :class:`Bind` marker::

    class ListPostsInput(msgspec.Struct, kw_only=True):
        id: Annotated[UInt64, Bind("path.id")]
        page: Annotated[UInt64, Bind("query.page")]
        search: Annotated[str, Bind("query.search")]
        languages: Annotated[list[str], Bind("header.Accept-Language")]
        title: str = ""

Unmarked fields are only ever filled from the JSON body, using the record's
own encoded field names. Decoding stops at the first failure and does not
roll back fields already assigned, so a target must be discarded once an
error has been raised.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Annotated, Any, Mapping, TypeVar, get_args, get_origin, get_type_hints

import msgspec
from msgspec import structs

from .coercion import ABSENT, SourceKind, coerce
from .exceptions import BodyError, DescriptorError, FieldError
from .requests import Request, decode_base64_body
from .serialization import convert, json_decode
from .typing_utils import TypeDescriptor, describe, zero_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LOCATIONS = {
    "path": SourceKind.PATH,
    "query": SourceKind.QUERY,
    "header": SourceKind.HEADER,
}


@dataclass(frozen=True, slots=True)
class Bind:
    """Binding annotation of the form ``"<location>.<key>"``."""

    tag: str


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    name: str
    kind: SourceKind
    key: str
    annotation: Any
    declared_type: TypeDescriptor | None = None


@dataclass(frozen=True, slots=True)
class _RecordField:
    name: str
    encode_name: str
    annotation: Any
    required: bool


@lru_cache(maxsize=None)
def _record_fields(record_type: type[Any]) -> tuple[_RecordField, ...]:
    if not isinstance(record_type, type):
        raise DescriptorError("invalid unmarshal target, must be a record type")
    if issubclass(record_type, msgspec.Struct):
        hints = get_type_hints(record_type, include_extras=True)
        return tuple(
            _RecordField(
                name=info.name,
                encode_name=info.encode_name,
                annotation=hints[info.name],
                required=info.required,
            )
            for info in structs.fields(record_type)
        )
    if dataclasses.is_dataclass(record_type):
        hints = get_type_hints(record_type, include_extras=True)
        return tuple(
            _RecordField(
                name=field.name,
                encode_name=field.name,
                annotation=hints[field.name],
                required=field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING,
            )
            for field in dataclasses.fields(record_type)
            if field.init
        )
    raise DescriptorError(
        f"invalid unmarshal target {record_type.__name__}, must be a msgspec Struct or dataclass"
    )


def _binding_of(annotation: Any) -> Bind | None:
    if get_origin(annotation) is not Annotated:
        return None
    for marker in get_args(annotation)[1:]:
        if isinstance(marker, Bind):
            return marker
    return None


@lru_cache(maxsize=None)
def resolve(record_type: type[Any]) -> tuple[FieldDescriptor, ...]:
    """Return the bound fields of ``record_type`` in declaration order."""

    descriptors: list[FieldDescriptor] = []
    for field in _record_fields(record_type):
        binding = _binding_of(field.annotation)
        if binding is None:
            continue
        components = binding.tag.split(".")
        if len(components) != 2:
            raise DescriptorError(
                f'invalid binding tag "{binding.tag}" for field {field.name}', field=field.name
            )
        location, key = components
        kind = _LOCATIONS.get(location)
        if kind is None:
            raise DescriptorError(
                f'invalid param location "{location}" for field {field.name}', field=field.name
            )
        try:
            declared = describe(field.annotation)
        except DescriptorError as exc:
            raise DescriptorError(f"{exc.message} for field {field.name}", field=field.name) from exc
        descriptors.append(FieldDescriptor(field.name, kind, key, field.annotation, declared))
    return tuple(descriptors)


@lru_cache(maxsize=None)
def resolve_body_fields(record_type: type[Any]) -> Mapping[str, FieldDescriptor]:
    """Map encoded JSON names to the fields the body may populate."""

    fields = {
        field.encode_name: FieldDescriptor(field.name, SourceKind.BODY, field.encode_name, field.annotation)
        for field in _record_fields(record_type)
        if _binding_of(field.annotation) is None
    }
    return MappingProxyType(fields)


def _ensure_mutable(target: Any) -> None:
    config = getattr(type(target), "__struct_config__", None)
    if config is not None and config.frozen:
        raise DescriptorError(f"invalid unmarshal target {type(target).__name__}, must not be frozen")
    params = getattr(type(target), "__dataclass_params__", None)
    if params is not None and params.frozen:
        raise DescriptorError(f"invalid unmarshal target {type(target).__name__}, must not be frozen")


def _body_error(exc: msgspec.ValidationError, key: str) -> BodyError:
    message = str(exc)
    if " - at `$" in message:
        message = message.replace(" - at `$", f" - at `$.{key}", 1)
    else:
        message = f"{message} - at `$.{key}`"
    return BodyError(f"invalid request body: {message}")


def merge_body(body: bytes, is_base64_encoded: bool, target: Any) -> None:
    """Decode a JSON object body and assign its keys onto ``target``'s body fields."""

    payload = body
    if is_base64_encoded:
        payload = decode_base64_body(body)
    try:
        document = json_decode(payload)
    except msgspec.DecodeError as exc:
        raise BodyError(f"invalid request body: {exc}") from exc
    if not isinstance(document, dict):
        raise BodyError(
            f"invalid request body: Expected `object`, got `{_json_kind(document)}`"
        )

    fields = resolve_body_fields(type(target))
    for key, value in document.items():
        field = fields.get(key)
        if field is None:
            continue
        try:
            converted = convert(value, field.annotation)
        except msgspec.ValidationError as exc:
            raise _body_error(exc, key) from exc
        setattr(target, field.name, converted)
    logger.debug("merged request body onto %s", type(target).__name__)


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "str"
    return "array"


def bind_fields(request: Request, target: Any) -> None:
    """Assign every bound field of ``target`` from ``request``."""

    for field in resolve(type(target)):
        values = request.lookup(field.kind, field.key)
        try:
            value = coerce(field.declared_type, values, key=field.key)
        except FieldError as exc:
            if exc.field is None:
                exc.field = field.name
            raise
        if value is ABSENT:
            continue
        setattr(target, field.name, value)


def unmarshal_request(request: Request, target: T, *, body: bool = False) -> T:
    """Fill ``target`` from ``request``; with ``body`` the JSON body is merged first."""

    _record_fields(type(target))
    _ensure_mutable(target)
    if body:
        merge_body(request.body, request.is_base64_encoded, target)
    bind_fields(request, target)
    logger.debug("decoded %s %s into %s", request.method, request.path, type(target).__name__)
    return target


def new_record(model: type[T]) -> T:
    """Instantiate ``model`` with every required field at its zero value."""

    values: dict[str, Any] = {}
    for field in _record_fields(model):
        if field.required:
            values[field.name] = _zero_for(field.annotation)
    return model(**values)


def _zero_for(annotation: Any) -> Any:
    try:
        return zero_value(describe(annotation))
    except DescriptorError:
        pass
    base = get_args(annotation)[0] if get_origin(annotation) is Annotated else annotation
    origin = get_origin(base) or base
    if isinstance(origin, type):
        if issubclass(origin, msgspec.Struct) or dataclasses.is_dataclass(origin):
            return new_record(origin)
        if origin in (dict, list, set):
            return origin()
    return None


def decode_request(request: Request, model: type[T], *, body: bool = False) -> T:
    """Construct a fresh ``model`` and fill it from ``request``."""

    return unmarshal_request(request, new_record(model), body=body)


__all__ = [
    "Bind",
    "FieldDescriptor",
    "bind_fields",
    "decode_request",
    "merge_body",
    "new_record",
    "resolve",
    "resolve_body_fields",
    "unmarshal_request",
]
