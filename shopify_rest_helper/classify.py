"""Turn non-2xx responses into typed errors.

Shopify error bodies carry an optional ``error`` string and an optional
``errors`` field that is one of::

    {"errors": "single message"}
    {"errors": ["first", "second"]}
    {"errors": {"title": ["is wrong"], "handle": "is taken"}}

The map form is flattened into ``"<key>: <message>"`` entries.
"""
from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Optional

import requests

from .errors import (
    RateLimitError,
    ResponseDecodingError,
    ResponseError,
    ShopifyError,
    TransportError,
)
from .ratelimit import RETRY_AFTER_HEADER, parse_retry_after


def is_success(status: int) -> bool:
    return HTTPStatus.OK <= status < HTTPStatus.MULTIPLE_CHOICES


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value, separators=(",", ":"))


def _flatten_errors(errors: Any) -> tuple[Optional[str], list[str]]:
    """Return ``(message, items)`` for the polymorphic ``errors`` field.

    ``message`` is the message this shape proposes (or ``None``); whether it
    replaces the top-level ``error`` message is decided by the caller.
    """
    if isinstance(errors, str):
        return errors, []
    if isinstance(errors, list):
        items = [_stringify(e) for e in errors]
        return ", ".join(items), items
    if isinstance(errors, dict):
        items = []
        for key, value in errors.items():
            if isinstance(value, str):
                items.append(f"{key}: {value}")
            elif isinstance(value, list):
                items.extend(f"{key}: {_stringify(v)}" for v in value)
        return (items[0] if items else None), items
    return None, []


def _wrap_specific_error(response: requests.Response, error: ResponseError) -> ResponseError:
    # https://shopify.dev/docs/api/usage/response-codes
    if error.status == HTTPStatus.TOO_MANY_REQUESTS:
        return RateLimitError(
            error.status,
            error.message,
            error.errors,
            retry_after=parse_retry_after(response.headers.get(RETRY_AFTER_HEADER)),
        )
    if error.status == HTTPStatus.NOT_ACCEPTABLE:
        error.message = HTTPStatus.NOT_ACCEPTABLE.phrase
    return error


def check_response_error(response: requests.Response) -> Optional[ShopifyError]:
    """Return the error described by ``response``, or ``None`` on 2xx.

    The error is returned rather than raised so the engine can decide
    whether to retry.
    """
    status = response.status_code
    if is_success(status):
        return None

    try:
        body = response.content or b""
    except requests.RequestException as exc:
        return TransportError(str(exc))

    message = ""
    errors: Any = None
    # An empty body still maps onto a status-specific error below.
    if body:
        try:
            payload = json.loads(body)
        except ValueError as exc:
            return ResponseDecodingError(str(exc), status=status, body=body)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            return ResponseDecodingError(
                f"expected a JSON object, got {type(payload).__name__}",
                status=status,
                body=body,
            )
        message = payload.get("error") or ""
        if not isinstance(message, str):
            return ResponseDecodingError(
                "error field is not a string", status=status, body=body
            )
        errors = payload.get("errors")

    error = ResponseError(status, message)
    if errors is None:
        return _wrap_specific_error(response, error)

    proposed, items = _flatten_errors(errors)
    if isinstance(errors, str):
        error.message = errors
    elif proposed and not error.message:
        error.message = proposed
    error.errors = items
    return _wrap_specific_error(response, error)
