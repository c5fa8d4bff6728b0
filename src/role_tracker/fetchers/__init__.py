"""Page loaders used by extractors."""

from role_tracker.fetchers.base import FetchAdapter, FetchOptions
from role_tracker.fetchers.static import StaticFetcher

__all__ = ["FetchAdapter", "FetchOptions", "StaticFetcher"]
