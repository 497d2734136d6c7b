"""Pagination helpers."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Iterable, Mapping, Optional

from .options import ListOptions
from .pagination import Pagination

ListPage = Callable[[Any], "tuple[list[Any], Pagination]"]


def cursor_pages(
    list_page: ListPage,
    options: Optional[ListOptions | Mapping[str, Any]] = None,
) -> Iterable[Any]:
    """
    Yield items from a cursor-paginated REST listing, requesting additional
    pages until the ``Link`` header no longer offers a ``next`` page.

    Args:
        list_page: A ``list_with_pagination``-style callable taking options and
            returning ``(items, Pagination)``.
        options: Options for the first page. Later pages only keep ``limit``
            and ``fields``; Shopify rejects other filters alongside
            ``page_info``.

    Yields:
        Each item, one at a time.

    Example:
        >>> for product in cursor_pages(session.product.list_with_pagination,
        ...                             ListOptions(limit=250)):
        ...     print(product["title"])
    """
    fields: Optional[str] = None
    if isinstance(options, ListOptions):
        fields = options.fields
    elif isinstance(options, Mapping):
        fields = options.get("fields")

    page_options: Any = options
    while True:
        items, pagination = list_page(page_options)
        for item in items:
            yield item
        next_options = pagination.next_page_options
        if next_options is None:
            break
        page_options = dataclasses.replace(next_options, fields=fields)
