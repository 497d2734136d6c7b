"""Price rules."""
from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService, resource_id

PRICE_RULES_BASE_PATH = "price_rules"


class PriceRuleService(ResourceService):
    def get(self, price_rule_id: int) -> dict[str, Any]:
        """Fetch a single price rule."""
        return self._get(f"{PRICE_RULES_BASE_PATH}/{price_rule_id}.json", "price_rule")

    def list(self) -> list[dict[str, Any]]:
        """List the shop's price rules."""
        return self._list(f"{PRICE_RULES_BASE_PATH}.json", "price_rules")

    def create(self, price_rule: Mapping[str, Any]) -> dict[str, Any]:
        """Create a price rule."""
        return self._post(
            f"{PRICE_RULES_BASE_PATH}.json", "price_rule", {"price_rule": price_rule}
        )

    def update(self, price_rule: Mapping[str, Any]) -> dict[str, Any]:
        """Update the price rule identified by ``price_rule["id"]``."""
        path = f"{PRICE_RULES_BASE_PATH}/{resource_id(price_rule)}.json"
        return self._put(path, "price_rule", {"price_rule": price_rule})

    def delete(self, price_rule_id: int) -> None:
        """Delete a price rule."""
        self._delete(f"{PRICE_RULES_BASE_PATH}/{price_rule_id}.json")
