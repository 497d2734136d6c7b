"""Shared plumbing for resource services."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from .. import client
from ..pagination import LINK_HEADER, Pagination, extract_pagination

if TYPE_CHECKING:
    from ..session import ShopifySession


class ResourceService:
    """Base for services that wrap one REST resource family.

    Shopify wraps bodies in an envelope named after the resource, e.g.
    ``{"product": {...}}`` or ``{"products": [...]}``; the helpers here add
    and remove that envelope.
    """

    def __init__(self, session: "ShopifySession") -> None:
        self.session = session

    def _get(self, path: str, key: str, options: Any = None) -> Any:
        data = client.get(self.session, path, options) or {}
        return data.get(key)

    def _list(self, path: str, key: str, options: Any = None) -> list[Any]:
        return self._get(path, key, options) or []

    def _list_with_pagination(
        self, path: str, key: str, options: Any = None
    ) -> tuple[list[Any], Pagination]:
        resp = client.create_and_execute(self.session, "GET", path, options=options)
        pagination = extract_pagination(resp.headers.get(LINK_HEADER, ""))
        return (resp.data or {}).get(key) or [], pagination

    def _post(self, path: str, key: str, data: Any = None) -> Any:
        return (client.post(self.session, path, data) or {}).get(key)

    def _put(self, path: str, key: str, data: Any = None) -> Any:
        return (client.put(self.session, path, data) or {}).get(key)

    def _delete(self, path: str) -> None:
        client.delete(self.session, path)

    def _count(self, path: str, options: Any = None) -> int:
        return client.count(self.session, path, options)


def resource_id(resource: Mapping[str, Any]) -> Any:
    """Return the ``id`` of a resource mapping, failing loudly when absent."""
    try:
        return resource["id"]
    except KeyError:
        raise ValueError("resource has no 'id'") from None
