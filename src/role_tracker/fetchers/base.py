"""Fetch adapter interface: turn a URL into document markup."""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field


class FetchOptions(BaseModel):
    """
    Per-source page loading options.

    Only the rendered fetcher honours the selector, settle and scroll
    settings; the static fetcher uses timeout_ms alone.
    """

    wait_for_selector: Optional[str] = Field(
        default=None, description="Selector to wait for before reading the page"
    )
    timeout_ms: int = Field(default=30000, description="Selector wait timeout")
    navigation_timeout_ms: int = Field(default=30000, description="Page navigation timeout")
    settle_ms: int = Field(default=2000, description="Fixed delay after load for client rendering")
    scroll_to_load: bool = False
    max_scrolls: int = 10
    scroll_wait_ms: int = 2000
    scroll_selector: Optional[str] = Field(
        default=None,
        description="Element counted between scrolls (defaults to wait_for_selector, then body)",
    )


class FetchAdapter(ABC):
    """Abstract page loader."""

    @abstractmethod
    def load(self, url: str, options: Optional[FetchOptions] = None) -> str:
        """
        Load a URL and return its markup.

        Raises:
            FetchError: On navigation failure or non-2xx response
        """
        pass

    def close(self) -> None:
        """Release long-lived resources. Default: nothing to release."""
        return None
