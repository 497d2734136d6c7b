"""Online store themes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..options import url_field
from .base import ResourceService, resource_id

THEMES_BASE_PATH = "themes"


@dataclass
class ThemeListOptions:
    """Filters for listing themes."""

    role: Optional[str] = url_field("role")
    fields: Optional[str] = url_field("fields")


class ThemeService(ResourceService):
    def list(self, options: Any = None) -> list[dict[str, Any]]:
        """List the shop's themes."""
        return self._list(f"{THEMES_BASE_PATH}.json", "themes", options)

    def create(self, theme: Mapping[str, Any]) -> dict[str, Any]:
        """Create a theme from a ``src`` archive or an empty one."""
        return self._post(f"{THEMES_BASE_PATH}.json", "theme", {"theme": theme})

    def get(self, theme_id: int, options: Any = None) -> dict[str, Any]:
        """Fetch a single theme."""
        return self._get(f"{THEMES_BASE_PATH}/{theme_id}.json", "theme", options)

    def update(self, theme: Mapping[str, Any]) -> dict[str, Any]:
        """Update the theme identified by ``theme["id"]``."""
        return self._put(
            f"{THEMES_BASE_PATH}/{resource_id(theme)}.json", "theme", {"theme": theme}
        )

    def delete(self, theme_id: int) -> None:
        """Delete a theme; the published theme cannot be deleted."""
        self._delete(f"{THEMES_BASE_PATH}/{theme_id}.json")
