"""Typed binding of API Gateway proxy requests and responses."""

from .binding import (
    Bind,
    FieldDescriptor,
    bind_fields,
    decode_request,
    merge_body,
    new_record,
    resolve,
    resolve_body_fields,
    unmarshal_request,
)
from .coercion import ABSENT, SourceKind, SourceValues, coerce
from .config import BindConfig
from .exceptions import BodyError, DescriptorError, FieldError, HTTPError, LambdaBindError
from .http import Status
from .objectid import NIL_OBJECT_ID, ObjectID
from .reporting import ErrorReporter, configure, default_reporter, to_client_error
from .requests import Request, marshal_request
from .responses import (
    Response,
    custom_response,
    empty_response,
    error_response,
    file_b64_response,
    file_response,
    status_and_error_response,
    success_response,
    unmarshal_response,
)
from .scalars import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .typing_utils import describe

__all__ = [
    "ABSENT",
    "Bind",
    "BindConfig",
    "BodyError",
    "DescriptorError",
    "ErrorReporter",
    "FieldDescriptor",
    "FieldError",
    "Float32",
    "Float64",
    "HTTPError",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "LambdaBindError",
    "NIL_OBJECT_ID",
    "ObjectID",
    "Request",
    "Response",
    "SourceKind",
    "SourceValues",
    "Status",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "bind_fields",
    "coerce",
    "configure",
    "custom_response",
    "decode_request",
    "default_reporter",
    "describe",
    "empty_response",
    "error_response",
    "file_b64_response",
    "file_response",
    "marshal_request",
    "merge_body",
    "new_record",
    "resolve",
    "resolve_body_fields",
    "status_and_error_response",
    "success_response",
    "to_client_error",
    "unmarshal_request",
    "unmarshal_response",
]
