from __future__ import annotations

import base64

import msgspec
import pytest

from lambdabind.coercion import SourceKind
from lambdabind.exceptions import BodyError, HTTPError
from lambdabind.requests import Request, marshal_request
from lambdabind.serialization import json_encode
from tests.support import ListPostsInput, UpdatePostInput


class BodyModel(msgspec.Struct):
    name: str


def test_query_string_derives_both_views() -> None:
    request = Request(query_string="terms=a&terms=b&page=2&empty=")
    assert request.multi_query_params == {"terms": ("a", "b"), "page": ("2",), "empty": ("",)}
    assert request.query_params == {"page": "2", "empty": ""}
    assert request.query("terms") == "b"
    assert request.query("page") == "2"
    assert request.query("missing", "default") == "default"


def test_header_pairs_derive_both_views_without_canonicalising() -> None:
    request = Request(header_pairs=[("Accept", "a"), ("Accept", "b"), ("X-Trace", "1")])
    assert request.multi_headers == {"Accept": ("a", "b"), "X-Trace": ("1",)}
    assert request.headers == {"X-Trace": "1"}
    assert request.header("X-Trace") == "1"
    assert request.header("x-trace") is None
    assert request.header("Accept") == "b"


def test_explicit_views_override_derived_ones() -> None:
    request = Request(query_string="page=1", query_params={"page": "9"})
    assert request.query_params["page"] == "9"
    assert request.multi_query_params["page"] == ("1",)


def test_lookup_by_source_kind() -> None:
    request = Request(path_params={"id": "1"}, query_string="q=x", headers={"H": "v"})
    assert request.lookup(SourceKind.PATH, "id").single == "1"
    assert request.lookup(SourceKind.PATH, "id").multi is None
    assert request.lookup(SourceKind.QUERY, "q").multi == ("x",)
    assert request.lookup(SourceKind.HEADER, "H").single == "v"
    with pytest.raises(ValueError):
        request.lookup(SourceKind.BODY, "anything")


def test_request_is_read_only() -> None:
    request = Request(method="post")
    assert request.method == "POST"
    with pytest.raises(AttributeError):
        request.method = "GET"
    with pytest.raises(TypeError):
        request.query_params["x"] = "y"  # type: ignore[index]


def test_body_helpers() -> None:
    payload = json_encode({"name": "Widget"})
    request = Request(body=payload)
    assert request.body == payload
    assert request.raw_body() == payload
    assert request.text() == '{"name":"Widget"}'
    assert request.json() == {"name": "Widget"}
    model = request.json(BodyModel)
    assert isinstance(model, BodyModel)
    assert model.name == "Widget"


def test_base64_body_helpers() -> None:
    request = Request(body=base64.b64encode(b'{"name": "Encoded"}'), is_base64_encoded=True)
    assert request.raw_body() == b'{"name": "Encoded"}'
    assert request.json(BodyModel).name == "Encoded"


def test_base64_body_ignores_line_breaks() -> None:
    request = Request(body=b"eyJuYW1lIjog\r\nIkVuY29kZWQifQ==\n", is_base64_encoded=True)
    assert request.raw_body() == b'{"name": "Encoded"}'


def test_body_helper_errors() -> None:
    with pytest.raises(BodyError) as excinfo:
        Request(body="%%%", is_base64_encoded=True).raw_body()
    assert excinfo.value.message.startswith("failed decoding body")
    with pytest.raises(BodyError):
        Request(body="{").json()
    with pytest.raises(BodyError):
        Request(body='{"name": 1}').json(BodyModel)
    assert Request().json() is None


def test_from_event() -> None:
    event = {
        "httpMethod": "GET",
        "path": "/posts/42",
        "pathParameters": {"id": "42"},
        "queryStringParameters": {"page": "2", "terms": "b"},
        "multiValueQueryStringParameters": {"page": ["2"], "terms": ["a", "b"]},
        "headers": {"Accept-Language": "he"},
        "multiValueHeaders": {"Accept-Language": ["en", "he"]},
        "body": None,
        "isBase64Encoded": False,
        "requestContext": {"stage": "prod"},
    }
    request = Request.from_event(event)
    assert request.method == "GET"
    assert request.path == "/posts/42"
    decoded = request.decode(ListPostsInput)
    assert decoded.id == 42
    assert decoded.page == 2
    assert decoded.terms == ["a", "b"]
    assert decoded.languages == ["en", "he"]


def test_from_event_with_null_sections() -> None:
    request = Request.from_event(
        {"pathParameters": None, "queryStringParameters": None, "headers": None, "body": None}
    )
    assert request.path_params == {}
    assert request.query_params == {}
    assert request.body == b""


def test_from_event_rejects_malformed_events() -> None:
    with pytest.raises(HTTPError) as excinfo:
        Request.from_event({"pathParameters": ["not", "a", "map"]})
    assert excinfo.value.status == 400
    assert excinfo.value.message.startswith("invalid request event: ")


def test_marshal_request_round_trip() -> None:
    request = marshal_request({"title": "Hi", "content": "There"}, path_params={"id": "8"})
    decoded = request.decode(UpdatePostInput, body=True)
    assert decoded.id == 8
    assert decoded.title == "Hi"
    assert decoded.content == "There"
