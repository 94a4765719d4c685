"""
Failure containment for the public analytics surface.

Every fetch the engine performs runs through `contain`, which turns the
outcome into a FetchResult: either the value or the FetchError that
prevented it. Public operations then fall back to their zero value, so a
reporting call never raises. A failed metric is indistinguishable from a
store with no data to callers of the public operations; tests inspect the
FetchResult instead.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

import structlog

from salespulse.storage.base import FetchError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a contained fetch: a value, or the error that replaced it."""

    value: Optional[T] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        """The fetched value, or `default` when the fetch failed."""
        return self.value if self.error is None else default


def contain(operation: str, store_id: str, fetch: Callable[[], T]) -> FetchResult[T]:
    """
    Run a fetch and capture any failure as a FetchError result.

    Record sources raise FetchError for transport, auth and query failures.
    Anything else escaping a source is wrapped into one as well, so callers
    only ever see the two outcomes.

    Args:
        operation: Public operation name, for the log line
        store_id: Store being queried, for the log line
        fetch: Zero-argument callable performing the fetch and computation

    Returns:
        FetchResult holding the value or the error
    """
    try:
        return FetchResult(value=fetch())
    except FetchError as e:
        error = e
    except Exception as e:
        error = FetchError(f"{type(e).__name__}: {e}")
        error.__cause__ = e

    logger.error(
        "analytics_fetch_failed",
        operation=operation,
        store_id=store_id,
        error=str(error),
    )
    return FetchResult(error=error)
