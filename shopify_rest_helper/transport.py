"""Transport abstractions."""
from __future__ import annotations

from abc import ABC, abstractmethod
import os
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    import requests


class Transport(ABC):
    """Abstract transport interface."""

    @abstractmethod
    def send(
        self,
        request: "requests.PreparedRequest",
        timeout: float,
    ) -> "requests.Response":  # noqa: D401
        """Send a prepared request."""
        raise NotImplementedError


class RequestsTransport(Transport):
    """Transport using a pooled ``requests.Session``.

    HTTP status handling (429, 503) belongs to the client; this transport
    only retries failures to establish a connection.

    Args:
        connect_retries: Attempts to re-establish a failed connection. Defaults
            to the ``SHOPIFY_REST_CONNECT_RETRIES`` env var or ``0``.
        backoff: Exponential backoff factor between connection retries.
            Defaults to the ``SHOPIFY_REST_BACKOFF`` env var or ``0.5`` seconds.
        pool_connections: Number of connection pools to cache.
        pool_maxsize: Maximum connections kept per pool.
        verify: TLS verification, passed through to ``requests``.
        cert: Client certificate, passed through to ``requests``.
        force_close: If True, send ``Connection: close`` with each request to
            disable keep-alives.
    """

    def __init__(
        self,
        *,
        connect_retries: int | None = None,
        backoff: float | None = None,
        pool_connections: int = 10,
        pool_maxsize: int = 10,
        verify: bool | str = True,
        cert: Optional[Any] = None,
        force_close: bool = False,
    ) -> None:
        import requests
        from requests.adapters import HTTPAdapter
        from urllib3.util import Retry

        retry_total = connect_retries if connect_retries is not None else int(
            os.getenv("SHOPIFY_REST_CONNECT_RETRIES", "0")
        )
        backoff_factor = backoff if backoff is not None else float(
            os.getenv("SHOPIFY_REST_BACKOFF", "0.5")
        )
        retry = Retry(
            total=retry_total,
            connect=retry_total,
            read=0,
            status=0,
            backoff_factor=backoff_factor,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(
            max_retries=retry,
            pool_connections=pool_connections,
            pool_maxsize=pool_maxsize,
        )
        session = requests.Session()
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.verify = verify
        session.cert = cert
        self._session = session
        self._force_close = force_close

    def send(
        self,
        request: "requests.PreparedRequest",
        timeout: float,
    ) -> "requests.Response":
        if self._force_close:
            request.headers["Connection"] = "close"
        return self._session.send(
            request,
            timeout=timeout,
            verify=self._session.verify,
            cert=self._session.cert,
        )
