"""Public API exports."""
__version__ = "0.1.0"

from .session import App, ShopifySession
from .client import ShopifyResponse, count, create_and_execute, delete, execute, get, post, put
from .errors import (
    InvalidInputError,
    InvalidPaginationURL,
    MalformedPaginationHeader,
    MissingPageCursor,
    PaginationError,
    RateLimitError,
    ResponseDecodingError,
    ResponseError,
    ShopifyError,
    TransportError,
)
from .logger import leveled_logger
from .options import CountOptions, ListOptions, url_field
from .paginate import cursor_pages
from .pagination import Pagination, extract_pagination
from .ratelimit import RateLimitInfo
from .request import new_request
from .transport import RequestsTransport, Transport

__all__ = [
    "App",
    "CountOptions",
    "InvalidInputError",
    "InvalidPaginationURL",
    "ListOptions",
    "MalformedPaginationHeader",
    "MissingPageCursor",
    "Pagination",
    "PaginationError",
    "RateLimitError",
    "RateLimitInfo",
    "RequestsTransport",
    "ResponseDecodingError",
    "ResponseError",
    "ShopifyError",
    "ShopifyResponse",
    "ShopifySession",
    "Transport",
    "TransportError",
    "count",
    "create_and_execute",
    "cursor_pages",
    "delete",
    "execute",
    "extract_pagination",
    "get",
    "leveled_logger",
    "new_request",
    "post",
    "put",
    "url_field",
]
