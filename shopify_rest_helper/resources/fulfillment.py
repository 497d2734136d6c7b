"""Fulfillments and fulfillment orders.

https://shopify.dev/docs/api/admin-rest/latest/resources/fulfillmentorder
"""
from __future__ import annotations

import datetime as _dt
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from .. import client
from ..util import fulfillment_order_path_prefix, fulfillment_path_prefix
from .base import ResourceService, resource_id

if TYPE_CHECKING:
    from ..session import ShopifySession


class HoldReason(str, Enum):
    """Reasons accepted when putting a fulfillment order on hold."""

    AWAITING_PAYMENT = "awaiting_payment"
    HIGH_RISK_OF_FRAUD = "high_risk_of_fraud"
    INCORRECT_ADDRESS = "incorrect_address"
    OUT_OF_STOCK = "inventory_out_of_stock"
    OTHER = "other"


class FulfillmentService(ResourceService):
    """Fulfillments under ``<resource>/<resource_id>/fulfillments``."""

    def __init__(
        self, session: "ShopifySession", resource: str = "", resource_id: int = 0
    ) -> None:
        super().__init__(session)
        self.prefix = fulfillment_path_prefix(resource, resource_id)

    def list(self, options: Any = None) -> list[dict[str, Any]]:
        """List fulfillments under this prefix."""
        return self._list(f"{self.prefix}.json", "fulfillments", options)

    def count(self, options: Any = None) -> int:
        """Count fulfillments under this prefix."""
        return self._count(f"{self.prefix}/count.json", options)

    def get(self, fulfillment_id: int, options: Any = None) -> dict[str, Any]:
        """Fetch a single fulfillment."""
        return self._get(f"{self.prefix}/{fulfillment_id}.json", "fulfillment", options)

    def create(self, fulfillment: Mapping[str, Any]) -> dict[str, Any]:
        """Create a fulfillment."""
        return self._post(
            f"{self.prefix}.json", "fulfillment", {"fulfillment": fulfillment}
        )

    def update(self, fulfillment: Mapping[str, Any]) -> dict[str, Any]:
        """Update the fulfillment identified by ``fulfillment["id"]``."""
        path = f"{self.prefix}/{resource_id(fulfillment)}.json"
        return self._put(path, "fulfillment", {"fulfillment": fulfillment})

    def complete(self, fulfillment_id: int) -> dict[str, Any]:
        """Mark a fulfillment as complete."""
        return self._post(f"{self.prefix}/{fulfillment_id}/complete.json", "fulfillment")

    def transition(self, fulfillment_id: int) -> dict[str, Any]:
        """Move a fulfillment to the ``open`` state."""
        return self._post(f"{self.prefix}/{fulfillment_id}/open.json", "fulfillment")

    def cancel(self, fulfillment_id: int) -> dict[str, Any]:
        """Cancel a fulfillment."""
        return self._post(f"{self.prefix}/{fulfillment_id}/cancel.json", "fulfillment")


class FulfillmentOrderService(ResourceService):
    def _path(self, fulfillment_order_id: int, action: str = "") -> str:
        prefix = fulfillment_order_path_prefix("fulfillment_orders", fulfillment_order_id)
        return f"{prefix}/{action}.json" if action else f"{prefix}.json"

    def list(self, order_id: int, options: Any = None) -> list[dict[str, Any]]:
        """List the fulfillment orders of an order."""
        prefix = fulfillment_order_path_prefix("orders", order_id)
        return self._list(f"{prefix}/fulfillment_orders.json", "fulfillment_orders", options)

    def get(self, fulfillment_order_id: int, options: Any = None) -> dict[str, Any]:
        """Fetch a single fulfillment order."""
        return self._get(self._path(fulfillment_order_id), "fulfillment_order", options)

    def cancel(self, fulfillment_order_id: int) -> dict[str, Any]:
        """Cancel a fulfillment order."""
        return self._post(self._path(fulfillment_order_id, "cancel"), "fulfillment_order")

    def close(self, fulfillment_order_id: int, message: str = "") -> dict[str, Any]:
        """Mark a fulfillment order as incomplete, with an optional message."""
        body = {"message": message} if message else {}
        return self._post(self._path(fulfillment_order_id, "close"), "fulfillment_order", body)

    def hold(
        self,
        fulfillment_order_id: int,
        notify: bool,
        reason: HoldReason | str,
        notes: str = "",
    ) -> dict[str, Any]:
        """Put a fulfillment order on hold."""
        hold: dict[str, Any] = {"reason": HoldReason(reason).value, "notify_merchant": notify}
        if notes:
            hold["reason_notes"] = notes
        return self._post(
            self._path(fulfillment_order_id, "hold"),
            "fulfillment_order",
            {"fulfillment_hold": hold},
        )

    def open(self, fulfillment_order_id: int) -> dict[str, Any]:
        """Open a scheduled fulfillment order."""
        return self._post(self._path(fulfillment_order_id, "open"), "fulfillment_order")

    def release_hold(self, fulfillment_order_id: int) -> dict[str, Any]:
        """Release the hold on a fulfillment order."""
        return self._post(self._path(fulfillment_order_id, "release_hold"), "fulfillment_order")

    def reschedule(self, fulfillment_order_id: int) -> dict[str, Any]:
        """Reschedule the fulfill-at time of a scheduled fulfillment order."""
        return self._post(self._path(fulfillment_order_id, "reschedule"), "fulfillment_order")

    def set_deadline(
        self, fulfillment_order_ids: Iterable[int], deadline: _dt.datetime
    ) -> None:
        """Set the fulfillment deadline of several fulfillment orders."""
        body = {
            "fulfillment_order_ids": list(fulfillment_order_ids),
            "fulfillment_deadline": deadline,
        }
        client.create_and_execute(
            self.session,
            "POST",
            "fulfillment_orders/set_fulfillment_orders_deadline.json",
            data=body,
            decode=False,
        )

    def move(
        self,
        fulfillment_order_id: int,
        new_location_id: int,
        line_items: Optional[Iterable[Mapping[str, int]]] = None,
    ) -> dict[str, Any]:
        """Move a fulfillment order to a new location.

        Returns the ``original_fulfillment_order``/``moved_fulfillment_order`` pair.
        """
        move: dict[str, Any] = {"new_location_id": new_location_id}
        if line_items:
            move["fulfillment_order_line_items"] = list(line_items)
        return client.post(
            self.session,
            self._path(fulfillment_order_id, "move"),
            {"fulfillment_order": move},
        ) or {}
