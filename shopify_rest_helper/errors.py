"""Error classes for the Shopify REST helper."""
from __future__ import annotations

from typing import Iterable, Optional


class ShopifyError(Exception):
    """Base class for every error raised by this package."""


class TransportError(ShopifyError):
    """Raised when the HTTP transport fails before a response is available."""


class InvalidInputError(ShopifyError, ValueError):
    """Raised when a request cannot be built from the given arguments."""


class ResponseError(ShopifyError):
    """A non-2xx response from Shopify.

    Mirrors Shopify's error payloads: either a single message or a list of
    messages (``errors``) for programmatic inspection.
    """

    def __init__(
        self,
        status: int,
        message: str = "",
        errors: Iterable[str] = (),
    ) -> None:
        self.status = status
        self.message = message
        self.errors = list(errors)
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.message:
            return self.message
        joined = ", ".join(sorted(self.errors))
        return joined or "Unknown Error"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status!r}, "
            f"message={self.message!r}, errors={self.errors!r})"
        )


class RateLimitError(ResponseError):
    """A 429 response; ``retry_after`` is in seconds."""

    def __init__(
        self,
        status: int,
        message: str = "",
        errors: Iterable[str] = (),
        retry_after: float = 0.0,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(status, message, errors)


class ResponseDecodingError(ShopifyError):
    """Raised when a response body (or header) could not be decoded."""

    def __init__(
        self, message: str, status: Optional[int] = None, body: bytes = b""
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body


class PaginationError(ResponseDecodingError):
    """Raised when a ``Link`` header cannot be turned into page options."""


class MalformedPaginationHeader(PaginationError):
    def __init__(self) -> None:
        super().__init__("could not extract pagination link header")


class InvalidPaginationURL(PaginationError):
    def __init__(self) -> None:
        super().__init__("pagination does not contain a valid URL")


class MissingPageCursor(PaginationError):
    def __init__(self) -> None:
        super().__init__("page_info is missing")
