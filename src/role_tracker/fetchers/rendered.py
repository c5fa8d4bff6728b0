"""
Headless-browser fetcher for client-rendered boards.

Each load launches chromium, renders the page, optionally scrolls to pull
in infinite-scroll results, and returns page.content(). The browser is
always closed before load() returns, whether it succeeded or not.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from role_tracker.exceptions import FetchError
from role_tracker.fetchers.base import FetchAdapter, FetchOptions
from role_tracker.fetchers.static import DEFAULT_USER_AGENT
from role_tracker.logging_config import format_url

logger = logging.getLogger(__name__)

# Consecutive scrolls without new elements before we stop
NO_GROWTH_LIMIT = 2


@contextmanager
def browser_page(
    headless: bool = True, user_agent: str = DEFAULT_USER_AGENT
) -> Iterator[Page]:
    """
    Yield a fresh chromium page and tear everything down on exit.

    Page, context, browser and the playwright driver are released in
    reverse order on every exit path.
    """
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=headless)
        try:
            context = browser.new_context(
                user_agent=user_agent, viewport={"width": 1920, "height": 1080}
            )
            try:
                page = context.new_page()
                try:
                    yield page
                finally:
                    page.close()
            finally:
                context.close()
        finally:
            browser.close()


class RenderedFetcher(FetchAdapter):
    """Playwright-backed fetcher (sync API)."""

    def __init__(self, headless: bool = True, user_agent: str = DEFAULT_USER_AGENT):
        self.headless = headless
        self.user_agent = user_agent

    def load(self, url: str, options: Optional[FetchOptions] = None) -> str:
        options = options or FetchOptions()
        logger.info(f"Rendering {format_url(url)}")

        try:
            with browser_page(self.headless, self.user_agent) as page:
                page.goto(url, wait_until="networkidle", timeout=options.navigation_timeout_ms)

                if options.wait_for_selector:
                    self._wait_for_selector(page, options.wait_for_selector, options.timeout_ms)

                page.wait_for_timeout(options.settle_ms)

                if options.scroll_to_load:
                    self.scroll_to_load(page, options)

                return page.content()
        except PlaywrightTimeoutError as e:
            raise FetchError(f"Timed out loading {url}: {e}", url=url) from e
        except PlaywrightError as e:
            raise FetchError(f"Browser failed on {url}: {e}", url=url) from e

    def _wait_for_selector(self, page: Page, selector: str, timeout_ms: int) -> None:
        try:
            page.wait_for_selector(selector, timeout=timeout_ms, state="visible")
        except PlaywrightTimeoutError:
            # Extractors fall back to whatever did render
            logger.warning(f"Selector '{selector}' did not appear within {timeout_ms}ms")

    def scroll_to_load(self, page: Page, options: FetchOptions) -> int:
        """
        Scroll to the bottom until the tracked element count stops growing.

        Stops after options.max_scrolls iterations or after two consecutive
        scrolls that load nothing new.

        Returns:
            Number of scroll iterations performed
        """
        selector = options.scroll_selector or options.wait_for_selector or "body"
        previous_count = 0
        no_growth = 0
        scrolls = 0

        while scrolls < options.max_scrolls:
            current_count = page.locator(selector).count()
            page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
            page.wait_for_timeout(options.scroll_wait_ms)

            if current_count == previous_count:
                no_growth += 1
                if no_growth >= NO_GROWTH_LIMIT:
                    logger.debug(f"No new '{selector}' elements after {NO_GROWTH_LIMIT} scrolls")
                    break
            else:
                no_growth = 0
                logger.debug(f"Loaded {current_count} '{selector}' elements (was {previous_count})")

            previous_count = current_count
            scrolls += 1

        logger.info(f"Finished scrolling after {scrolls} iterations")
        return scrolls
