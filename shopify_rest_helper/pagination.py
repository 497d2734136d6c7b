"""Cursor pagination extracted from the ``Link`` response header.

Details on the format:
https://shopify.dev/docs/api/usage/pagination-rest
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from .errors import InvalidPaginationURL, MalformedPaginationHeader, MissingPageCursor
from .options import ListOptions

LINK_HEADER = "Link"

_LINK_RE = re.compile(r'^ *<([^>]+)>; rel="(previous|next)" *$')
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_LIMIT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class Pagination:
    """Options to request the pages around the current one, when they exist."""

    next_page_options: Optional[ListOptions] = None
    previous_page_options: Optional[ListOptions] = None


def _page_options(link: str) -> ListOptions:
    if link.startswith(":") or _BAD_ESCAPE_RE.search(link):
        raise InvalidPaginationURL()
    try:
        query = urlsplit(link).query
        params = parse_qs(query, keep_blank_values=True)
    except ValueError as exc:
        raise InvalidPaginationURL() from exc

    page_info = (params.get("page_info") or [""])[0]
    if not page_info:
        raise MissingPageCursor()

    options = ListOptions(page_info=page_info)
    limit = (params.get("limit") or [""])[0]
    if limit:
        if not _LIMIT_RE.fullmatch(limit):
            raise ValueError(f"invalid limit {limit!r}")
        options.limit = int(limit)
    return options


def extract_pagination(link_header: str | None) -> Pagination:
    """Parse a ``Link`` header into next/previous page options.

    Args:
        link_header: Raw header value; empty or ``None`` means no pagination.

    Raises:
        MalformedPaginationHeader: If an entry is not ``<url>; rel="next|previous"``.
        InvalidPaginationURL: If the linked URL cannot be parsed.
        MissingPageCursor: If the linked URL carries no ``page_info``.
        ValueError: If ``limit`` is present but not an integer.

    Example:
        >>> p = extract_pagination('<https://x/products.json?page_info=abc>; rel="next"')
        >>> p.next_page_options.page_info
        'abc'
    """
    pagination = Pagination()
    if not link_header:
        return pagination

    for link in link_header.split(","):
        match = _LINK_RE.match(link)
        if match is None:
            raise MalformedPaginationHeader()
        url, rel = match.groups()
        options = _page_options(url)
        if rel == "next":
            pagination.next_page_options = options
        else:
            pagination.previous_page_options = options
    return pagination
