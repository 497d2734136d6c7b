import io
import logging
import time
from dataclasses import dataclass, field
import pathlib
import sys

import pytest
import requests
from requests.structures import CaseInsensitiveDict

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from shopify_rest_helper.client import count, create_and_execute, execute, retry_delay
from shopify_rest_helper.errors import (
    InvalidInputError,
    RateLimitError,
    ResponseDecodingError,
    ResponseError,
    TransportError,
)
from shopify_rest_helper.logger import leveled_logger
from shopify_rest_helper.options import CountOptions
from shopify_rest_helper.ratelimit import RateLimitInfo
from shopify_rest_helper.request import new_request
from shopify_rest_helper.session import ShopifySession
from shopify_rest_helper.transport import Transport

RATE_LIMITED = (
    '{"errors":"Exceeded 2 calls per second for api client. '
    'Reduce request rates to resume uninterrupted service."}'
)


@dataclass
class DummyResponse:
    status_code: int
    text: str = ""
    headers: dict = field(default_factory=dict)
    reason: str = ""

    def __post_init__(self):
        self.headers = CaseInsensitiveDict(self.headers)

    @property
    def content(self):
        return self.text.encode()

    def close(self):
        pass


class ListTransport(Transport):
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def send(self, request, timeout):
        self.calls.append(request)
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def make_session(transport, **kwargs):
    kwargs.setdefault("api_version", "2024-01")
    return ShopifySession("fooshop", "abcd", transport=transport, **kwargs)


@pytest.fixture
def slept(monkeypatch):
    calls = []
    monkeypatch.setattr(time, "sleep", lambda s: calls.append(s))
    return calls


def test_execute_success_decodes_body():
    transport = ListTransport([DummyResponse(200, '{"foo": "bar"}')])
    session = make_session(transport)
    resp = execute(session, new_request(session, "GET", "foo/1"))
    assert resp.data == {"foo": "bar"}
    assert resp.attempts == 1
    assert transport.calls[0].url == "https://fooshop.myshopify.com/foo/1"


@pytest.mark.parametrize(
    "status, body, expected",
    [
        (404, '{"error": "does not exist"}', ResponseError(404, "does not exist")),
        (
            400,
            '{"errors": {"title": ["wrong"]}}',
            ResponseError(400, "title: wrong", ["title: wrong"]),
        ),
        (406, "", ResponseError(406, "Not Acceptable")),
    ],
)
def test_execute_raises_response_errors(status, body, expected):
    transport = ListTransport([DummyResponse(status, body)])
    session = make_session(transport, retries=3)
    with pytest.raises(ResponseError) as exc:
        execute(session, new_request(session, "GET", "foo"))
    assert type(exc.value) is ResponseError
    assert exc.value.status == expected.status
    assert exc.value.message == expected.message
    assert exc.value.errors == expected.errors
    assert len(transport.calls) == 1


def test_execute_transport_error_is_not_retried():
    transport = ListTransport(
        [requests.exceptions.ConnectionError("something something")]
    )
    session = make_session(transport, retries=3)
    with pytest.raises(TransportError) as exc:
        execute(session, new_request(session, "GET", "foo"))
    assert "something something" in str(exc.value)
    assert len(transport.calls) == 1


def test_execute_invalid_json_on_success():
    transport = ListTransport([DummyResponse(200, "{foo:bar}")])
    session = make_session(transport)
    with pytest.raises(ResponseDecodingError) as exc:
        execute(session, new_request(session, "GET", "foo"))
    assert exc.value.status == 200
    assert exc.value.body == b"{foo:bar}"


def test_execute_invalid_json_on_error():
    transport = ListTransport([DummyResponse(500, "<html></html>")])
    session = make_session(transport)
    with pytest.raises(ResponseDecodingError) as exc:
        execute(session, new_request(session, "GET", "foo"))
    assert exc.value.status == 500
    assert exc.value.body == b"<html></html>"


def test_execute_without_decode_ignores_empty_body():
    transport = ListTransport([DummyResponse(200, "")])
    session = make_session(transport)
    resp = execute(session, new_request(session, "DELETE", "foo"), decode=False)
    assert resp.data is None
    assert resp.status_code == 200


def test_retry_rate_limited_then_success(slept):
    limited = DummyResponse(429, RATE_LIMITED, {"Retry-After": "2.0"})
    transport = ListTransport([limited, limited, DummyResponse(200, '{"foo": "bar"}')])
    session = make_session(transport, retries=3)
    resp = execute(session, new_request(session, "GET", "foo/2"))
    assert resp.data == {"foo": "bar"}
    assert resp.attempts == 3
    assert len(transport.calls) == 3
    assert slept == [2.0, 2.0]


def test_retry_all_rate_limited(slept):
    transport = ListTransport(
        [
            DummyResponse(429, RATE_LIMITED, {"Retry-After": str(seconds)})
            for seconds in (1, 2, 3)
        ]
    )
    session = make_session(transport, retries=3)
    with pytest.raises(RateLimitError) as exc:
        execute(session, new_request(session, "GET", "foo/3"))
    assert len(transport.calls) == 3
    assert exc.value.status == 429
    assert exc.value.retry_after == 3
    assert exc.value.message.startswith("Exceeded 2 calls per second")
    # no sleep after the final attempt
    assert slept == [1.0, 2.0]


def test_retry_honours_fractional_retry_after(slept):
    transport = ListTransport(
        [
            DummyResponse(429, "", {"Retry-After": "0.5"}),
            DummyResponse(200, "{}"),
        ]
    )
    session = make_session(transport, retries=2)
    execute(session, new_request(session, "GET", "foo"))
    assert slept == [0.5]


def test_retry_service_unavailable_then_success(slept):
    unavailable = DummyResponse(503, "<html></html>")
    transport = ListTransport([unavailable, unavailable, DummyResponse(200, '{"foo": "bar"}')])
    session = make_session(transport, retries=3)
    resp = execute(session, new_request(session, "GET", "foo/4"))
    assert resp.data == {"foo": "bar"}
    assert resp.attempts == 3
    assert slept == []


def test_retry_all_service_unavailable(slept):
    transport = ListTransport([DummyResponse(503, "") for _ in range(3)])
    session = make_session(transport, retries=3)
    with pytest.raises(ResponseError) as exc:
        execute(session, new_request(session, "GET", "foo/5"))
    assert exc.value.status == 503
    assert exc.value.message == ""
    assert len(transport.calls) == 3


@pytest.mark.parametrize("retries", [0, 1])
def test_no_retry_budget_fails_fast(slept, retries):
    transport = ListTransport([DummyResponse(429, RATE_LIMITED, {"Retry-After": "2"})])
    session = make_session(transport, retries=retries)
    with pytest.raises(RateLimitError):
        execute(session, new_request(session, "GET", "foo"))
    assert len(transport.calls) == 1
    assert slept == []


def test_retry_delay_only_for_retryable_errors():
    assert retry_delay(RateLimitError(429, retry_after=1.5)) == 1.5
    assert retry_delay(ResponseError(503)) == 0.0
    assert retry_delay(ResponseError(500)) is None
    assert retry_delay(ResponseDecodingError("bad", status=503)) == 0.0
    assert retry_delay(ResponseDecodingError("bad", status=500)) is None


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"X-Shopify-Shop-Api-Call-Limit": "15/30"}, RateLimitInfo(15, 30, 0)),
        (
            {"X-Shopify-Shop-Api-Call-Limit": "0/30", "Retry-after": "30"},
            RateLimitInfo(0, 30, 30),
        ),
        (
            {"X-Shopify-Shop-Api-Call-Limit": "invalid/invalid", "Retry-after": "invalid"},
            RateLimitInfo(0, 0, 0),
        ),
        ({}, RateLimitInfo(0, 0, 0)),
    ],
)
def test_execute_updates_rate_limits(headers, expected):
    transport = ListTransport([DummyResponse(200, '{"foo": "bar"}', headers)])
    session = make_session(transport)
    resp = execute(session, new_request(session, "GET", "foo/1"))
    assert resp.rate_limits == expected
    assert session.rate_limits.snapshot() == expected


def test_session_rate_limits_survive_response_without_header():
    transport = ListTransport(
        [
            DummyResponse(200, "{}", {"X-Shopify-Shop-Api-Call-Limit": "15/30"}),
            DummyResponse(200, "{}"),
        ]
    )
    session = make_session(transport)
    execute(session, new_request(session, "GET", "foo/1"))
    resp = execute(session, new_request(session, "GET", "foo/2"))
    assert resp.rate_limits == RateLimitInfo(15, 30, 0)
    assert session.rate_limits.snapshot() == RateLimitInfo(15, 30, 0)


def test_execute_pins_api_version_from_first_response():
    transport = ListTransport(
        [
            DummyResponse(200, "", {"X-Shopify-API-Version": "9999-99"}),
            DummyResponse(200, "", {"X-Shopify-API-Version": "1111-11"}),
        ]
    )
    session = ShopifySession("fooshop", "abcd", transport=transport)
    execute(session, new_request(session, "GET", "foo/1"), decode=False)
    assert session.api_version == "9999-99"
    assert session.path_prefix == "admin"

    resp = execute(session, new_request(session, "GET", "foo/1"), decode=False)
    assert resp.api_version == "1111-11"
    assert session.api_version == "9999-99"


def test_explicit_api_version_is_not_overridden():
    transport = ListTransport([DummyResponse(200, "{}", {"X-Shopify-API-Version": "9999-99"})])
    session = make_session(transport)
    execute(session, new_request(session, "GET", "foo"))
    assert session.api_version == "2024-01"


def test_execute_logs_request_and_response():
    out, err = io.StringIO(), io.StringIO()
    logger = leveled_logger(logging.DEBUG, stdout=out, stderr=err, name="test.execute.debug")
    transport = ListTransport([DummyResponse(200, "response body", reason="OK")])
    session = make_session(transport, logger=logger)
    request = new_request(session, "POST", "foo/1", body="request body")
    execute(session, request, decode=False)
    assert out.getvalue() == (
        "[DEBUG] POST: https://fooshop.myshopify.com/foo/1\n"
        '[DEBUG] SENT: "request body"\n'
        "[DEBUG] RECV 200: OK\n"
        "[DEBUG] RESP: response body\n"
    )
    assert err.getvalue() == ""


def test_execute_does_not_log_empty_bodies():
    out = io.StringIO()
    logger = leveled_logger(logging.DEBUG, stdout=out, stderr=io.StringIO(), name="test.execute.empty")
    transport = ListTransport([DummyResponse(204, "", reason="No Content")])
    session = make_session(transport, logger=logger)
    execute(session, new_request(session, "GET", "foo"), decode=False)
    assert out.getvalue() == (
        "[DEBUG] GET: https://fooshop.myshopify.com/foo\n"
        "[DEBUG] RECV 204: No Content\n"
    )


@pytest.mark.parametrize("path", ["foo/1", "/foo/1"])
def test_create_and_execute_prefixes_path(path):
    transport = ListTransport([DummyResponse(200, '{"foo": "bar"}')])
    session = make_session(transport)
    resp = create_and_execute(session, "GET", path)
    assert resp.data == {"foo": "bar"}
    assert transport.calls[0].url == "https://fooshop.myshopify.com/admin/api/2024-01/foo/1"


def test_create_and_execute_rejects_bad_options():
    transport = ListTransport([])
    session = make_session(transport)
    with pytest.raises(InvalidInputError):
        create_and_execute(session, "GET", "foo/1", options=123)
    assert transport.calls == []


def test_count_with_and_without_options():
    import datetime as dt

    transport = ListTransport([DummyResponse(200, '{"count": 5}'), DummyResponse(200, '{"count": 2}')])
    session = make_session(transport)
    assert count(session, "foocount") == 5
    date = dt.datetime(2016, 1, 1, tzinfo=dt.timezone.utc)
    assert count(session, "foocount", CountOptions(created_at_min=date)) == 2
    assert transport.calls[1].url == (
        "https://fooshop.myshopify.com/admin/api/2024-01/foocount"
        "?created_at_min=2016-01-01T00%3A00%3A00Z"
    )
