"""Rate-limit telemetry reported by Shopify on each response."""
from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from typing import Mapping, Optional

CALL_LIMIT_HEADER = "X-Shopify-Shop-Api-Call-Limit"
RETRY_AFTER_HEADER = "Retry-After"


@dataclass(frozen=True)
class RateLimitInfo:
    """Last observed consumption of the shop's leaky bucket.

    Attributes:
        request_count: Calls currently counted against the bucket
        bucket_size: Capacity of the bucket
        retry_after_seconds: Value of the ``Retry-After`` header, if any
    """

    request_count: int = 0
    bucket_size: int = 0
    retry_after_seconds: float = 0.0


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def parse_retry_after(value: str | None) -> float:
    """Parse a ``Retry-After`` value in (fractional) seconds; 0 when invalid."""
    if not value:
        return 0.0
    try:
        seconds = float(value)
    except ValueError:
        return 0.0
    return seconds if math.isfinite(seconds) else 0.0


def _parse_call_limit(headers: Mapping[str, str]) -> Optional[tuple[int, int]]:
    """Return ``(request_count, bucket_size)``, or None without a ``used/size`` header."""
    parts = (headers.get(CALL_LIMIT_HEADER) or "").split("/")
    if len(parts) != 2:
        return None
    return _to_int(parts[0]), _to_int(parts[1])


def parse_rate_limits(headers: Mapping[str, str]) -> RateLimitInfo:
    """Build a :class:`RateLimitInfo` from response headers.

    Unparseable values are reported as zero rather than raised.
    """
    request_count, bucket_size = _parse_call_limit(headers) or (0, 0)
    return RateLimitInfo(
        request_count=request_count,
        bucket_size=bucket_size,
        retry_after_seconds=parse_retry_after(headers.get(RETRY_AFTER_HEADER)),
    )


@dataclass
class RateLimitTracker:
    """Thread-safe holder for the latest :class:`RateLimitInfo` of a session.

    Every successful response overwrites ``retry_after_seconds``. The bucket
    counts are only replaced by responses carrying the call-limit header, so
    they describe whichever call last reported them.
    """

    latest: RateLimitInfo = field(default_factory=RateLimitInfo)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def update(self, headers: Mapping[str, str]) -> RateLimitInfo:
        """Fold one response's headers into the snapshot and return it."""
        call_limit = _parse_call_limit(headers)
        retry_after = parse_retry_after(headers.get(RETRY_AFTER_HEADER))
        with self.lock:
            if call_limit is None:
                call_limit = (self.latest.request_count, self.latest.bucket_size)
            self.latest = RateLimitInfo(*call_limit, retry_after_seconds=retry_after)
            return self.latest

    def snapshot(self) -> RateLimitInfo:
        with self.lock:
            return self.latest

    @property
    def request_count(self) -> int:
        return self.snapshot().request_count

    @property
    def bucket_size(self) -> int:
        return self.snapshot().bucket_size

    @property
    def retry_after_seconds(self) -> float:
        return self.snapshot().retry_after_seconds
