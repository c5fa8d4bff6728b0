"""Tests for the static (requests) and rendered (playwright) fetchers."""

from unittest.mock import MagicMock, Mock, patch

import pytest
import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from role_tracker.exceptions import FetchError
from role_tracker.fetchers.base import FetchOptions
from role_tracker.fetchers.rendered import RenderedFetcher
from role_tracker.fetchers.static import StaticFetcher


def response(status_code=200, text="<html></html>", json_data=None):
    mock = Mock()
    mock.status_code = status_code
    mock.text = text
    if isinstance(json_data, Exception):
        mock.json.side_effect = json_data
    else:
        mock.json.return_value = json_data
    return mock


@pytest.fixture
def session():
    mock = Mock()
    mock.headers = {}
    return mock


@pytest.fixture
def fetcher(session):
    return StaticFetcher(session=session, max_retries=2, retry_wait_seconds=1)


@pytest.fixture
def mock_sleep():
    with patch("role_tracker.fetchers.static.time.sleep") as sleep:
        yield sleep


class TestStaticFetcher:
    """Test GET/POST handling and the retry loop."""

    def test_sets_browser_headers(self, fetcher, session):
        assert "Mozilla" in session.headers["User-Agent"]
        assert session.headers["Accept-Language"].startswith("en-US")

    def test_load(self, fetcher, session):
        session.request.return_value = response(text="<ul>jobs</ul>")

        html = fetcher.load("https://www.ycombinator.com/jobs", FetchOptions(timeout_ms=5000))

        assert html == "<ul>jobs</ul>"
        session.request.assert_called_once_with("GET", "https://www.ycombinator.com/jobs", timeout=5.0)

    def test_retries_transient_status(self, fetcher, session, mock_sleep):
        session.request.side_effect = [response(503), response(429), response(text="ok")]

        assert fetcher.load("https://example.com/jobs") == "ok"
        assert session.request.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    def test_gives_up_after_retries(self, fetcher, session, mock_sleep):
        session.request.return_value = response(503)

        with pytest.raises(FetchError) as exc_info:
            fetcher.load("https://example.com/jobs")

        assert exc_info.value.status_code == 503
        assert session.request.call_count == 3

    def test_client_error_is_not_retried(self, fetcher, session, mock_sleep):
        session.request.return_value = response(404)

        with pytest.raises(FetchError, match="HTTP 404"):
            fetcher.load("https://example.com/missing")

        mock_sleep.assert_not_called()

    def test_network_errors_are_retried(self, fetcher, session, mock_sleep):
        session.request.side_effect = [requests.ConnectionError("reset"), response(text="ok")]
        assert fetcher.load("https://example.com/jobs") == "ok"

        session.request.side_effect = requests.Timeout("slow")
        with pytest.raises(FetchError, match="failed"):
            fetcher.load("https://example.com/jobs")

    def test_post_json(self, fetcher, session):
        session.request.return_value = response(json_data={"jobs": []})

        data = fetcher.post_json("https://jobs.a16z.com/api-boards/search-jobs", {"meta": {"size": 10}})

        assert data == {"jobs": []}
        method, url = session.request.call_args.args
        assert method == "POST"
        assert session.request.call_args.kwargs["json"] == {"meta": {"size": 10}}

    def test_post_json_invalid_body(self, fetcher, session):
        session.request.return_value = response(json_data=ValueError("no json"))
        with pytest.raises(FetchError, match="Invalid JSON"):
            fetcher.post_json("https://example.com/api", {})

    def test_close(self, fetcher, session):
        fetcher.close()
        session.close.assert_called_once()


@pytest.fixture
def mock_page():
    """Patch sync_playwright and hand back the page every load sees."""
    with patch("role_tracker.fetchers.rendered.sync_playwright") as mock_playwright:
        playwright = mock_playwright.return_value.__enter__.return_value
        browser = playwright.chromium.launch.return_value
        context = browser.new_context.return_value
        page = MagicMock()
        page.content.return_value = "<html>rendered</html>"
        context.new_page.return_value = page
        page.browser = browser
        page.context_ = context
        yield page


class TestRenderedFetcher:
    """Test the playwright-backed fetcher with the browser mocked out."""

    def test_load(self, mock_page):
        html = RenderedFetcher().load("https://jobs.a16z.com/jobs", FetchOptions(settle_ms=100))

        assert html == "<html>rendered</html>"
        mock_page.goto.assert_called_once_with(
            "https://jobs.a16z.com/jobs", wait_until="networkidle", timeout=30000
        )
        mock_page.wait_for_timeout.assert_called_with(100)
        mock_page.close.assert_called_once()
        mock_page.context_.close.assert_called_once()
        mock_page.browser.close.assert_called_once()

    def test_waits_for_selector(self, mock_page):
        options = FetchOptions(wait_for_selector=".job-card", timeout_ms=5000)
        RenderedFetcher().load("https://example.com", options)
        mock_page.wait_for_selector.assert_called_once_with(".job-card", timeout=5000, state="visible")

    def test_missing_selector_is_not_fatal(self, mock_page):
        mock_page.wait_for_selector.side_effect = PlaywrightTimeoutError("not found")
        options = FetchOptions(wait_for_selector=".job-card")
        assert RenderedFetcher().load("https://example.com", options) == "<html>rendered</html>"

    def test_navigation_timeout(self, mock_page):
        mock_page.goto.side_effect = PlaywrightTimeoutError("timeout")

        with pytest.raises(FetchError, match="Timed out"):
            RenderedFetcher().load("https://example.com")

        mock_page.browser.close.assert_called_once()

    def test_browser_error(self, mock_page):
        mock_page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        with pytest.raises(FetchError, match="Browser failed"):
            RenderedFetcher().load("https://example.invalid")

    def test_scroll_stops_when_nothing_new_loads(self):
        page = MagicMock()
        page.locator.return_value.count.side_effect = [10, 20, 20, 20, 20]
        options = FetchOptions(scroll_to_load=True, max_scrolls=10, scroll_selector=".card")

        scrolls = RenderedFetcher().scroll_to_load(page, options)

        assert scrolls == 3
        page.locator.assert_called_with(".card")

    def test_scroll_respects_max(self):
        page = MagicMock()
        page.locator.return_value.count.side_effect = range(1, 100)
        options = FetchOptions(scroll_to_load=True, max_scrolls=4)

        assert RenderedFetcher().scroll_to_load(page, options) == 4
        page.locator.assert_called_with("body")

    def test_load_scrolls_when_asked(self, mock_page):
        mock_page.locator.return_value.count.return_value = 5
        options = FetchOptions(scroll_to_load=True, wait_for_selector=".card", settle_ms=0)

        RenderedFetcher().load("https://example.com", options)

        mock_page.evaluate.assert_called_with("window.scrollTo(0, document.body.scrollHeight)")
