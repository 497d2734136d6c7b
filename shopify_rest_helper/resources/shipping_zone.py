"""Shipping zones."""
from __future__ import annotations

from typing import Any

from .base import ResourceService


class ShippingZoneService(ResourceService):
    def list(self) -> list[dict[str, Any]]:
        """List shipping zones with their countries and rates."""
        return self._list("shipping_zones.json", "shipping_zones")
