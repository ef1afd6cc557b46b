"""
                Delivery Orders API

A small backend for recording delivery orders (food, address and
payment attachment) with a per-day sequential short order number.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
