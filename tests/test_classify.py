from dataclasses import dataclass, field
import pathlib
import sys

import pytest
import requests
from requests.structures import CaseInsensitiveDict

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from shopify_rest_helper.classify import check_response_error
from shopify_rest_helper.errors import (
    RateLimitError,
    ResponseDecodingError,
    ResponseError,
    TransportError,
)


@dataclass
class DummyResponse:
    status_code: int
    text: str = ""
    headers: dict = field(default_factory=dict)

    def __post_init__(self):
        self.headers = CaseInsensitiveDict(self.headers)

    @property
    def content(self):
        return self.text.encode()


class UnreadableResponse(DummyResponse):
    @property
    def content(self):
        raise requests.exceptions.ChunkedEncodingError("test-error")


@pytest.mark.parametrize("status", [200, 201, 299])
def test_success_statuses_have_no_error(status):
    assert check_response_error(DummyResponse(status, '{"foo": "bar"}')) is None


@pytest.mark.parametrize(
    "status, body, message, errors",
    [
        (400, '{"error": "bad request"}', "bad request", []),
        (500, '{"error": "terrible error"}', "terrible error", []),
        (
            500,
            '{"errors": "This action requires read_customers scope"}',
            "This action requires read_customers scope",
            [],
        ),
        (500, '{"errors": ["not", "very good"]}', "not, very good", ["not", "very good"]),
        (
            400,
            '{"errors": { "order": ["order is wrong"] }}',
            "order: order is wrong",
            ["order: order is wrong"],
        ),
        (
            400,
            '{"errors": { "collection_id": "collection_id is wrong" }}',
            "collection_id: collection_id is wrong",
            ["collection_id: collection_id is wrong"],
        ),
        (422, '{"errors": [1, 2.0, true, null]}', "1, 2, true, null", ["1", "2", "true", "null"]),
        (
            422,
            '{"error": "primary", "errors": ["a", "b"]}',
            "primary",
            ["a", "b"],
        ),
        (422, '{"errors": {"title": 5}}', "", []),
        (404, "null", "", []),
        (503, "", "", []),
    ],
)
def test_generic_errors(status, body, message, errors):
    err = check_response_error(DummyResponse(status, body))
    assert type(err) is ResponseError
    assert err.status == status
    assert err.message == message
    assert err.errors == errors


def test_map_errors_keep_every_entry():
    body = '{"errors": {"title": ["is blank", "is too short"]}}'
    err = check_response_error(DummyResponse(422, body))
    assert err.message == "title: is blank"
    assert err.errors == ["title: is blank", "title: is too short"]


def test_rate_limited_error_parses_retry_after():
    body = '{"errors":"Exceeded 2 calls per second for api client."}'
    err = check_response_error(DummyResponse(429, body, {"Retry-After": "2.0"}))
    assert isinstance(err, RateLimitError)
    assert isinstance(err, ResponseError)
    assert err.retry_after == 2
    assert err.message == "Exceeded 2 calls per second for api client."


@pytest.mark.parametrize("retry_after", ["", "soon"])
def test_rate_limited_error_defaults_retry_after(retry_after):
    err = check_response_error(DummyResponse(429, "", {"Retry-After": retry_after}))
    assert isinstance(err, RateLimitError)
    assert err.retry_after == 0


@pytest.mark.parametrize("body", ["", '{"error": "ignored"}', '{"errors": ["x"]}'])
def test_not_acceptable_uses_reason_phrase(body):
    err = check_response_error(DummyResponse(406, body))
    assert err.message == "Not Acceptable"


@pytest.mark.parametrize("body", ["{error:bad request}", "<html></html>", "[1, 2]", '{"error": 5}'])
def test_undecodable_bodies(body):
    err = check_response_error(DummyResponse(400, body))
    assert isinstance(err, ResponseDecodingError)
    assert err.status == 400
    assert err.body == body.encode()
    assert err.message


def test_unreadable_body_is_transport_error():
    err = check_response_error(UnreadableResponse(400))
    assert isinstance(err, TransportError)
    assert "test-error" in str(err)


@pytest.mark.parametrize(
    "err, expected",
    [
        (ResponseError(400, "oh no"), "oh no"),
        (ResponseError(400), "Unknown Error"),
        (ResponseError(400, errors=["title: not a valid title"]), "title: not a valid title"),
        (
            ResponseError(400, errors=["not a valid title", "not a valid description"]),
            "not a valid description, not a valid title",
        ),
    ],
)
def test_response_error_str(err, expected):
    assert str(err) == expected
