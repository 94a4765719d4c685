"""API routers for all endpoints."""

from salespulse.routers import metrics

__all__ = ["metrics"]
