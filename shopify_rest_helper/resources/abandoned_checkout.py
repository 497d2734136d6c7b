"""Abandoned checkouts."""
from __future__ import annotations

from typing import Any

from .base import ResourceService

ABANDONED_CHECKOUTS_BASE_PATH = "checkouts"


class AbandonedCheckoutService(ResourceService):
    def list(self, options: Any = None) -> list[dict[str, Any]]:
        """List abandoned checkouts."""
        return self._list(f"{ABANDONED_CHECKOUTS_BASE_PATH}.json", "checkouts", options)
