"""
API routes and endpoints.
"""

from . import health, roster

__all__ = ["health", "roster"]
