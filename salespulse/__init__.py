"""SalesPulse: store-level order analytics."""

__version__ = "0.1.0"
