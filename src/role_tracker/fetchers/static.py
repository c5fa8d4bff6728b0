"""Plain HTTP fetcher for server-rendered boards and JSON endpoints."""

import logging
import time
from typing import Any, Dict, Optional

import requests

from role_tracker.exceptions import FetchError
from role_tracker.fetchers.base import FetchAdapter, FetchOptions

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Status codes worth another attempt after a pause
RETRY_STATUS_CODES = {429, 500, 502, 503, 504}


class StaticFetcher(FetchAdapter):
    """
    requests-based fetcher with a bounded retry-and-wait loop.

    Usage:
        fetcher = StaticFetcher(max_retries=2)
        html = fetcher.load("https://www.ycombinator.com/jobs")
        data = fetcher.post_json(api_url, {"meta": {"size": 100}})
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        max_retries: int = 2,
        retry_wait_seconds: float = 2.0,
        session: Optional[requests.Session] = None,
    ):
        self.max_retries = max_retries
        self.retry_wait_seconds = retry_wait_seconds
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept-Language": "en-US,en;q=0.9",
            }
        )

    def load(self, url: str, options: Optional[FetchOptions] = None) -> str:
        options = options or FetchOptions()
        response = self._request("GET", url, timeout=options.timeout_ms / 1000)
        return response.text

    def post_json(
        self, url: str, payload: Dict[str, Any], timeout_seconds: float = 30
    ) -> Any:
        """POST a JSON body and decode the JSON response."""
        response = self._request(
            "POST",
            url,
            timeout=timeout_seconds,
            json=payload,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}: {e}", url=url) from e

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        attempt = 0
        while True:
            attempt += 1
            try:
                response = self.session.request(method, url, **kwargs)
            except requests.RequestException as e:
                if attempt <= self.max_retries:
                    logger.warning(f"{method} {url} failed ({e}), retry {attempt}/{self.max_retries}")
                    time.sleep(self.retry_wait_seconds * attempt)
                    continue
                raise FetchError(f"{method} {url} failed: {e}", url=url) from e

            if response.status_code in RETRY_STATUS_CODES and attempt <= self.max_retries:
                logger.warning(
                    f"{method} {url} returned {response.status_code}, "
                    f"retry {attempt}/{self.max_retries}"
                )
                time.sleep(self.retry_wait_seconds * attempt)
                continue

            if not 200 <= response.status_code < 300:
                raise FetchError(
                    f"{method} {url} returned HTTP {response.status_code}",
                    url=url,
                    status_code=response.status_code,
                )

            return response

    def close(self) -> None:
        self.session.close()
