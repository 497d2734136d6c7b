"""Session object for the Shopify Admin REST API."""
from __future__ import annotations

import logging
import os
import re
import threading
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from .logger import LOGGER_NAME
from .ratelimit import RateLimitTracker
from .resources import (
    AbandonedCheckoutService,
    CollectionService,
    FulfillmentOrderService,
    FulfillmentService,
    MetafieldService,
    PriceRuleService,
    ProductListingService,
    ProductService,
    ShippingZoneService,
    ThemeService,
)
from .transport import RequestsTransport, Transport
from .util import shop_base_url

# Unversioned requests go to "admin", which serves the oldest stable version.
DEFAULT_API_PATH_PREFIX = "admin"
DEFAULT_API_VERSION = "stable"
UNSTABLE_API_VERSION = "unstable"
DEFAULT_TIMEOUT = 10.0

_API_VERSION_RE = re.compile(r"^[0-9]{4}-[0-9]{2}$")
_HOST_RE = re.compile(r"^[A-Za-z0-9._-]+(:[0-9]+)?$")


def api_path_prefix(api_version: str | None) -> str:
    """Return the path prefix for ``api_version``.

    ``YYYY-MM`` and ``"unstable"`` select ``admin/api/<version>``; any other
    value falls back to the unversioned ``admin`` prefix.
    """
    if api_version and (
        _API_VERSION_RE.match(api_version) or api_version == UNSTABLE_API_VERSION
    ):
        return f"admin/api/{api_version}"
    return DEFAULT_API_PATH_PREFIX


@dataclass
class App:
    """Basic app settings such as API key, secret, scope and redirect URL.

    ``password`` is a private app password, used for basic auth when no
    access token is configured.
    """

    api_key: str = ""
    api_secret: str = ""
    redirect_url: str = ""
    scope: str = ""
    password: str = ""


@dataclass
class ShopifySession:
    """Represents a session for interacting with a specific Shopify store's REST API.

    One session is meant to be reused for many sequential calls. Per-call
    details (attempts, rate limits) are returned on each
    :class:`~shopify_rest_helper.client.ShopifyResponse`; the copies kept on
    the session only reflect the most recent call.

    Attributes:
        shop_name: The shop's myshopify domain (``"theshop.myshopify.com"``) or just ``"theshop"``
        access_token: A permanent access token; takes precedence over ``app.password``
        app: App credentials used for basic auth on private apps
        api_version: ``YYYY-MM``, ``"unstable"`` or ``"stable"`` (default). With
            ``"stable"`` the version reported by the first response is recorded here.
        retries: Attempt budget per call, including the first; 0 and 1 mean no retries
        timeout: Per-request timeout in seconds, applied to every attempt
        transport: Transport implementation for making HTTP requests (defaults to RequestsTransport)
        logger: Logger receiving request/response debug records
        rate_limits: Thread-safe holder of the last observed rate limits
    """

    shop_name: str
    access_token: str = ""
    app: App = field(default_factory=App)
    api_version: str = DEFAULT_API_VERSION
    retries: int = 0
    timeout: float = DEFAULT_TIMEOUT
    transport: Transport = field(default_factory=RequestsTransport)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(LOGGER_NAME))
    rate_limits: RateLimitTracker = field(default_factory=RateLimitTracker)
    base_url: str = field(init=False)
    path_prefix: str = field(init=False)

    def __post_init__(self) -> None:
        """Derive the base URL and path prefix and attach the resource services."""
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        self.base_url = shop_base_url(self.shop_name)
        host = urlsplit(self.base_url).netloc
        if not _HOST_RE.match(host):
            raise ValueError(f"invalid shop name: {self.shop_name!r}")
        self.path_prefix = api_path_prefix(self.api_version)
        self._lock = threading.Lock()

        self.product = ProductService(self)
        self.product_listing = ProductListingService(self)
        self.collection = CollectionService(self)
        self.metafield = MetafieldService(self)
        self.fulfillment_order = FulfillmentOrderService(self)
        self.price_rule = PriceRuleService(self)
        self.shipping_zone = ShippingZoneService(self)
        self.theme = ThemeService(self)
        self.abandoned_checkout = AbandonedCheckoutService(self)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ShopifySession":
        """Build a session from ``SHOPIFY_*`` environment variables.

        Keyword arguments override the environment.
        """
        kwargs: dict[str, Any] = {
            "shop_name": os.getenv("SHOPIFY_SHOP", ""),
            "access_token": os.getenv("SHOPIFY_ACCESS_TOKEN", ""),
            "api_version": os.getenv("SHOPIFY_API_VERSION", DEFAULT_API_VERSION),
            "retries": int(os.getenv("SHOPIFY_RETRIES", "0")),
            "timeout": float(os.getenv("SHOPIFY_TIMEOUT", str(DEFAULT_TIMEOUT))),
            "app": App(
                api_key=os.getenv("SHOPIFY_API_KEY", ""),
                api_secret=os.getenv("SHOPIFY_API_SECRET", ""),
                password=os.getenv("SHOPIFY_PASSWORD", ""),
            ),
        }
        kwargs.update(overrides)
        if not kwargs["shop_name"]:
            raise ValueError("SHOPIFY_SHOP is not set")
        return cls(**kwargs)

    def pin_api_version(self, reported: str | None) -> bool:
        """Record the server's API version if none was chosen explicitly.

        Only the recorded version changes; the path prefix chosen at
        construction is kept. Returns True when the version was pinned.
        """
        if not reported:
            return False
        with self._lock:
            if self.api_version != DEFAULT_API_VERSION:
                return False
            self.api_version = reported
        return True

    def order_fulfillments(self, order_id: int) -> FulfillmentService:
        """Return a fulfillment service scoped to ``orders/<order_id>``."""
        return FulfillmentService(self, "orders", order_id)
