"""Metafields, either shop-level or attached to another resource."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from ..util import metafield_path_prefix
from .base import ResourceService, resource_id

if TYPE_CHECKING:
    from ..session import ShopifySession


class MetafieldService(ResourceService):
    """Metafields under ``<resource>/<resource_id>/metafields``.

    With no ``resource`` the shop-level ``metafields`` endpoints are used.
    """

    def __init__(
        self, session: "ShopifySession", resource: str = "", resource_id: int = 0
    ) -> None:
        super().__init__(session)
        self.prefix = metafield_path_prefix(resource, resource_id)

    def list(self, options: Any = None) -> list[dict[str, Any]]:
        """List metafields under this prefix."""
        return self._list(f"{self.prefix}.json", "metafields", options)

    def count(self, options: Any = None) -> int:
        """Count metafields under this prefix."""
        return self._count(f"{self.prefix}/count.json", options)

    def get(self, metafield_id: int, options: Any = None) -> dict[str, Any]:
        """Fetch a single metafield."""
        return self._get(f"{self.prefix}/{metafield_id}.json", "metafield", options)

    def create(self, metafield: Mapping[str, Any]) -> dict[str, Any]:
        """Create a metafield."""
        return self._post(f"{self.prefix}.json", "metafield", {"metafield": metafield})

    def update(self, metafield: Mapping[str, Any]) -> dict[str, Any]:
        """Update the metafield identified by ``metafield["id"]``."""
        path = f"{self.prefix}/{resource_id(metafield)}.json"
        return self._put(path, "metafield", {"metafield": metafield})

    def delete(self, metafield_id: int) -> None:
        """Delete a metafield."""
        self._delete(f"{self.prefix}/{metafield_id}.json")
