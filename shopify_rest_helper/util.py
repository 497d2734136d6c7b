"""Shop name and resource path helpers."""
from __future__ import annotations

SHOP_DOMAIN = "myshopify.com"


def shop_full_name(name: str) -> str:
    """Return the full shop name, including ``.myshopify.com``."""
    name = name.strip().strip(".")
    if SHOP_DOMAIN in name:
        return name
    return f"{name}.{SHOP_DOMAIN}"


def shop_short_name(name: str) -> str:
    """Return the short shop name, excluding ``.myshopify.com``."""
    return shop_full_name(name).replace(f".{SHOP_DOMAIN}", "")


def shop_base_url(name: str) -> str:
    return f"https://{shop_full_name(name)}"


def metafield_path_prefix(resource: str, resource_id: int) -> str:
    if resource:
        return f"{resource}/{resource_id}/metafields"
    return "metafields"


def fulfillment_path_prefix(resource: str, resource_id: int) -> str:
    if resource:
        return f"{resource}/{resource_id}/fulfillments"
    return "fulfillments"


def fulfillment_order_path_prefix(resource: str, resource_id: int) -> str:
    return f"{resource}/{resource_id}"
