"""Resource services built on the client primitives."""
from .abandoned_checkout import AbandonedCheckoutService
from .collection import CollectionService
from .fulfillment import FulfillmentOrderService, FulfillmentService, HoldReason
from .metafield import MetafieldService
from .price_rule import PriceRuleService
from .product import ProductListOptions, ProductListingService, ProductService
from .shipping_zone import ShippingZoneService
from .theme import ThemeListOptions, ThemeService

__all__ = [
    "AbandonedCheckoutService",
    "CollectionService",
    "FulfillmentOrderService",
    "FulfillmentService",
    "HoldReason",
    "MetafieldService",
    "PriceRuleService",
    "ProductListOptions",
    "ProductListingService",
    "ProductService",
    "ShippingZoneService",
    "ThemeListOptions",
    "ThemeService",
]
