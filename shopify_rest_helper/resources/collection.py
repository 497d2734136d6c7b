"""Collections (custom or smart) and their products."""
from __future__ import annotations

from typing import Any

from ..pagination import Pagination
from .base import ResourceService

COLLECTIONS_BASE_PATH = "collections"


class CollectionService(ResourceService):
    def get(self, collection_id: int, options: Any = None) -> dict[str, Any]:
        """Fetch a single collection, custom or smart."""
        return self._get(
            f"{COLLECTIONS_BASE_PATH}/{collection_id}.json", "collection", options
        )

    def list_products(self, collection_id: int, options: Any = None) -> list[dict[str, Any]]:
        """List the products of a collection."""
        products, _ = self.list_products_with_pagination(collection_id, options)
        return products

    def list_products_with_pagination(
        self, collection_id: int, options: Any = None
    ) -> tuple[list[dict[str, Any]], Pagination]:
        """List a collection's products along with the next/previous page options."""
        return self._list_with_pagination(
            f"{COLLECTIONS_BASE_PATH}/{collection_id}/products.json", "products", options
        )
