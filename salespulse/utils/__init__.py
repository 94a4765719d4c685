"""Utility modules for logging, request tracing, and common helpers."""

from salespulse.utils.logging import bind_metric_context, configure_logging, get_logger

__all__ = ["bind_metric_context", "configure_logging", "get_logger"]
