"""
Business logic layer.
Composition root wiring the analytics engine to its record source and cache.
"""

from functools import lru_cache

from salespulse.config import get_settings
from salespulse.engine.analytics import OrderAnalyticsEngine
from salespulse.engine.count_cache import CountCache
from salespulse.storage import get_storage


@lru_cache
def get_analytics_engine() -> OrderAnalyticsEngine:
    """
    Get the process-wide analytics engine (singleton).

    The count cache lives on this instance, so every request in the process
    shares one cache.
    """
    settings = get_settings()
    return OrderAnalyticsEngine(
        source=get_storage(),
        count_cache=CountCache(ttl_millis=settings.count_cache_ttl_millis),
    )


__all__ = ["get_analytics_engine"]
