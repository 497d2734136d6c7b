"""Products and product listings.

https://shopify.dev/docs/api/admin-rest/latest/resources/product
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional

from ..options import ListOptions, url_field
from ..paginate import cursor_pages
from ..pagination import Pagination
from .base import ResourceService, resource_id
from .metafield import MetafieldService

PRODUCTS_BASE_PATH = "products"
PRODUCT_LISTINGS_BASE_PATH = "product_listings"


@dataclass
class ProductListOptions(ListOptions):
    collection_id: Optional[int] = url_field("collection_id")
    product_type: Optional[str] = url_field("product_type")
    handle: Optional[str] = url_field("handle")
    published_at_min: Optional[_dt.datetime] = url_field("published_at_min")
    published_at_max: Optional[_dt.datetime] = url_field("published_at_max")
    published_status: Optional[str] = url_field("published_status")
    presentment_currencies: Optional[str] = url_field("presentment_currencies")


class ProductService(ResourceService):
    def list(self, options: Any = None) -> list[dict[str, Any]]:
        """List products (first page only)."""
        products, _ = self.list_with_pagination(options)
        return products

    def list_with_pagination(
        self, options: Any = None
    ) -> tuple[list[dict[str, Any]], Pagination]:
        """List products along with the options for the next/previous pages."""
        return self._list_with_pagination(
            f"{PRODUCTS_BASE_PATH}.json", "products", options
        )

    def list_all(self, options: Any = None) -> Iterator[dict[str, Any]]:
        """Yield every product, following cursor pages."""
        return cursor_pages(self.list_with_pagination, options)

    def count(self, options: Any = None) -> int:
        """Count products matching ``options``."""
        return self._count(f"{PRODUCTS_BASE_PATH}/count.json", options)

    def get(self, product_id: int, options: Any = None) -> dict[str, Any]:
        """Fetch a single product."""
        return self._get(f"{PRODUCTS_BASE_PATH}/{product_id}.json", "product", options)

    def create(self, product: Mapping[str, Any]) -> dict[str, Any]:
        """Create a product."""
        return self._post(
            f"{PRODUCTS_BASE_PATH}.json", "product", {"product": product}
        )

    def update(self, product: Mapping[str, Any]) -> dict[str, Any]:
        """Update the product identified by ``product["id"]``."""
        path = f"{PRODUCTS_BASE_PATH}/{resource_id(product)}.json"
        return self._put(path, "product", {"product": product})

    def delete(self, product_id: int) -> None:
        """Delete a product."""
        self._delete(f"{PRODUCTS_BASE_PATH}/{product_id}.json")

    def _metafields(self, product_id: int) -> MetafieldService:
        return MetafieldService(self.session, PRODUCTS_BASE_PATH, product_id)

    def list_metafields(self, product_id: int, options: Any = None) -> list[dict[str, Any]]:
        """List a product's metafields."""
        return self._metafields(product_id).list(options)

    def count_metafields(self, product_id: int, options: Any = None) -> int:
        """Count a product's metafields."""
        return self._metafields(product_id).count(options)

    def get_metafield(
        self, product_id: int, metafield_id: int, options: Any = None
    ) -> dict[str, Any]:
        """Fetch one metafield of a product."""
        return self._metafields(product_id).get(metafield_id, options)

    def create_metafield(
        self, product_id: int, metafield: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Attach a new metafield to a product."""
        return self._metafields(product_id).create(metafield)

    def update_metafield(
        self, product_id: int, metafield: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Update one metafield of a product."""
        return self._metafields(product_id).update(metafield)

    def delete_metafield(self, product_id: int, metafield_id: int) -> None:
        """Remove a metafield from a product."""
        self._metafields(product_id).delete(metafield_id)


class ProductListingService(ResourceService):
    """Products published to the calling sales channel app."""

    def list(self, options: Any = None) -> list[dict[str, Any]]:
        """List product listings (first page only)."""
        listings, _ = self.list_with_pagination(options)
        return listings

    def list_with_pagination(
        self, options: Any = None
    ) -> tuple[list[dict[str, Any]], Pagination]:
        """List product listings along with the next/previous page options."""
        return self._list_with_pagination(
            f"{PRODUCT_LISTINGS_BASE_PATH}.json", "product_listings", options
        )

    def count(self, options: Any = None) -> int:
        """Count products published to the app."""
        return self._count(f"{PRODUCT_LISTINGS_BASE_PATH}/count.json", options)

    def get(self, product_id: int, options: Any = None) -> dict[str, Any]:
        """Fetch the listing of a single product."""
        return self._get(
            f"{PRODUCT_LISTINGS_BASE_PATH}/{product_id}.json", "product_listing", options
        )

    def get_product_ids(self, options: Any = None) -> list[int]:
        """List the ids of products published to the app."""
        return self._list(
            f"{PRODUCT_LISTINGS_BASE_PATH}/product_ids.json", "product_ids", options
        )

    def publish(self, product_id: int) -> dict[str, Any]:
        """Publish a product to the app."""
        body = {"product_listing": {"product_id": product_id}}
        return self._put(
            f"{PRODUCT_LISTINGS_BASE_PATH}/{product_id}.json", "product_listing", body
        )

    def delete(self, product_id: int) -> None:
        """Unpublish a product from the app."""
        self._delete(f"{PRODUCT_LISTINGS_BASE_PATH}/{product_id}.json")
