"""Request construction."""
from __future__ import annotations

import dataclasses
import datetime as _dt
import json
import re
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

import requests
from requests.auth import HTTPBasicAuth

from . import __version__
from .errors import InvalidInputError
from .options import flatten_options

if TYPE_CHECKING:
    from .session import ShopifySession

USER_AGENT = f"shopify-rest-helper/{__version__}"
ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"

# RFC 7230 token characters.
_METHOD_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_CTL_RE = re.compile(r"[\x00-\x1f\x7f]")


def _json_default(value: Any) -> Any:
    if isinstance(value, (_dt.datetime, _dt.date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_body(body: Any) -> bytes:
    """Serialize ``body`` to JSON bytes.

    Raises:
        InvalidInputError: If ``body`` cannot be serialized.
    """
    try:
        return json.dumps(body, default=_json_default).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"cannot encode request body: {exc}") from exc


def _merge_query(existing: str, options: Any) -> str:
    merged: dict[str, list[str]] = {}
    for key, value in parse_qsl(existing, keep_blank_values=True):
        merged.setdefault(key, []).append(value)
    for key, value in flatten_options(options):
        merged.setdefault(key, []).append(value)
    return urlencode([(k, v) for k in sorted(merged) for v in merged[k]])


def new_request(
    session: "ShopifySession",
    method: str,
    rel_path: str,
    body: Any = None,
    options: Any = None,
) -> requests.PreparedRequest:
    """Build an authenticated request for ``rel_path`` on the session's shop.

    Relative paths are resolved against ``session.base_url`` and should be
    given without a leading slash. ``body`` is JSON encoded; ``options`` is
    flattened into the query string after any parameters already on
    ``rel_path``.

    Raises:
        InvalidInputError: If the path, method, body or options are invalid.

    Example:
        >>> req = new_request(session, "GET", "foo?page=1", options={"limit": 10})
        >>> req.url
        'https://fooshop.myshopify.com/foo?limit=10&page=1'
    """
    if not _METHOD_RE.match(method or ""):
        raise InvalidInputError(f"invalid method {method!r}")
    if rel_path.startswith(":"):
        raise InvalidInputError(f"parse {rel_path!r}: missing protocol scheme")
    if _CTL_RE.search(rel_path):
        raise InvalidInputError(f"parse {rel_path!r}: invalid control character in URL")
    try:
        url = urljoin(session.base_url + "/", rel_path)
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidInputError(f"parse {rel_path!r}: {exc}") from exc

    if options is not None:
        parts = parts._replace(query=_merge_query(parts.query, options))
        url = urlunsplit(parts)

    data = encode_body(body) if body is not None else None

    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
    }
    auth = None
    if session.access_token:
        headers[ACCESS_TOKEN_HEADER] = session.access_token
    elif session.app.password:
        auth = HTTPBasicAuth(session.app.api_key, session.app.password)

    try:
        return requests.Request(
            method, url, headers=headers, data=data, auth=auth
        ).prepare()
    except requests.RequestException as exc:
        raise InvalidInputError(str(exc)) from exc
