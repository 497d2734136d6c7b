"""Client helpers: request execution, retries and decoding."""
from __future__ import annotations

import json
import logging
import posixpath
import time
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Mapping, Optional

import requests

from .classify import check_response_error
from .errors import (
    RateLimitError,
    ResponseDecodingError,
    ResponseError,
    ShopifyError,
    TransportError,
)
from .ratelimit import RateLimitInfo
from .request import new_request

if TYPE_CHECKING:
    from .session import ShopifySession

API_VERSION_HEADER = "X-Shopify-API-Version"


@dataclass
class ShopifyResponse:
    """Outcome of one logical call, including all retries.

    Attributes:
        status_code: Status of the final (successful) attempt
        headers: Headers of the final attempt
        data: Decoded JSON body, or None when decoding was not requested
        attempts: Number of HTTP attempts made
        rate_limits: Session rate limits after the final attempt; bucket counts
            carry over from earlier calls when the header is missing
        api_version: Value of ``X-Shopify-API-Version``, if sent
    """

    status_code: int
    headers: Mapping[str, str]
    data: Any = None
    attempts: int = 1
    rate_limits: RateLimitInfo = field(default_factory=RateLimitInfo)
    api_version: Optional[str] = None


def retry_delay(error: ShopifyError) -> Optional[float]:
    """Return the seconds to wait before retrying after ``error``, or None.

    Only rate limiting (429) and service unavailability (503) are retried; a
    503 is retried even when its body could not be decoded.
    """
    if isinstance(error, RateLimitError):
        return max(error.retry_after, 0.0)
    if (
        isinstance(error, (ResponseError, ResponseDecodingError))
        and error.status == HTTPStatus.SERVICE_UNAVAILABLE
    ):
        return 0.0
    return None


def _body_text(body: Any) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return str(body)


def _log_request(log: logging.Logger, request: requests.PreparedRequest) -> None:
    log.debug("%s: %s", request.method, request.url)
    if request.body:
        log.debug("SENT: %s", _body_text(request.body))


def _log_response(log: logging.Logger, response: requests.Response) -> None:
    log.debug("RECV %d: %s", response.status_code, response.reason)
    try:
        content = response.content
    except requests.RequestException:
        return
    if content:
        log.debug("RESP: %s", _body_text(content))


def execute(
    session: "ShopifySession",
    request: requests.PreparedRequest,
    decode: bool = True,
) -> ShopifyResponse:
    """Send ``request``, retrying rate-limited and unavailable responses.

    Up to ``session.retries`` attempts are made (at least one). A 429 waits
    for the server's ``Retry-After`` before the next attempt; a 503 is retried
    immediately. Any other failure is raised straight away.

    Args:
        session: The session the request was built for
        request: A request from :func:`~shopify_rest_helper.request.new_request`
        decode: Decode the JSON body into ``ShopifyResponse.data``

    Returns:
        ShopifyResponse: Body, headers and per-call telemetry

    Raises:
        TransportError: If the request could not be sent
        ResponseError: For API errors (``RateLimitError`` for 429)
        ResponseDecodingError: If a body is not valid JSON

    Example:
        >>> req = new_request(session, "GET", "admin/api/2024-01/shop.json")
        >>> execute(session, req).data["shop"]["name"]
    """
    log = session.logger
    max_attempts = max(session.retries, 1)
    _log_request(log, request)

    for attempt in range(1, max_attempts + 1):
        try:
            resp = session.transport.send(request, timeout=session.timeout)
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        _log_response(log, resp)

        error = check_response_error(resp)
        if error is None:
            break
        resp.close()

        delay = retry_delay(error)
        if attempt >= max_attempts or delay is None:
            raise error
        if isinstance(error, RateLimitError):
            log.debug("rate limited waiting %ss", delay)
            time.sleep(delay)
        else:
            log.debug("service unavailable, retrying")

    reported_version = resp.headers.get(API_VERSION_HEADER)
    if session.pin_api_version(reported_version):
        log.info("api version not set, now using %s", reported_version)

    rate_limits = session.rate_limits.update(resp.headers)

    data = None
    if decode:
        try:
            data = json.loads(resp.content)
        except ValueError as exc:
            raise ResponseDecodingError(
                str(exc), status=resp.status_code, body=resp.content
            ) from exc

    return ShopifyResponse(
        status_code=resp.status_code,
        headers=resp.headers,
        data=data,
        attempts=attempt,
        rate_limits=rate_limits,
        api_version=reported_version,
    )


def create_and_execute(
    session: "ShopifySession",
    method: str,
    rel_path: str,
    data: Any = None,
    options: Any = None,
    decode: bool = True,
) -> ShopifyResponse:
    """Build and send a request for ``rel_path`` under the session's path prefix.

    ``rel_path`` is relative to the API root (e.g. ``"orders.json"``); a
    leading slash is ignored.
    """
    path, sep, query = rel_path.lstrip("/").partition("?")
    path = posixpath.normpath(posixpath.join(session.path_prefix, path))
    request = new_request(session, method, path + sep + query, data, options)
    return execute(session, request, decode=decode)


def get(session: "ShopifySession", path: str, options: Any = None) -> Any:
    """GET ``path`` and return the decoded body."""
    return create_and_execute(session, "GET", path, options=options).data


def post(session: "ShopifySession", path: str, data: Any = None) -> Any:
    """POST ``data`` to ``path`` and return the decoded body."""
    return create_and_execute(session, "POST", path, data=data).data


def put(session: "ShopifySession", path: str, data: Any = None) -> Any:
    """PUT ``data`` to ``path`` and return the decoded body."""
    return create_and_execute(session, "PUT", path, data=data).data


def delete(session: "ShopifySession", path: str) -> None:
    """DELETE ``path``; the response body is not decoded."""
    create_and_execute(session, "DELETE", path, decode=False)


def count(session: "ShopifySession", path: str, options: Any = None) -> int:
    """Return the ``count`` reported by a ``*/count.json`` endpoint."""
    data = get(session, path, options)
    return int((data or {}).get("count", 0))
