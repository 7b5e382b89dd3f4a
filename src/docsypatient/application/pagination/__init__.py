"""
Paginated list loading.
"""

from .loader import PageFetcher, PaginatedLoader

__all__ = ["PageFetcher", "PaginatedLoader"]
