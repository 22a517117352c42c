"""
Middleware package for the listing admin API.
"""

from .validation import ValidationMiddleware

__all__ = ["ValidationMiddleware"]
