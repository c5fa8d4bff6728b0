"""Tests for the scrape runner."""

from unittest.mock import MagicMock, Mock, patch

import pytest

from factories import NOW, make_role, make_source
from role_tracker.exceptions import FetchError, PersistenceError, StoreUnavailableError
from role_tracker.fetchers.base import FetchAdapter
from role_tracker.models import ExtractedRole, UpsertOutcome
from role_tracker.reconciler import RoleReconciler
from role_tracker.scrape_runner import ScrapeRunner
from role_tracker.scrapers.base import BaseExtractor


class FakeFetcher(FetchAdapter):
    def __init__(self):
        self.loaded = []

    def load(self, url, options=None):
        self.loaded.append(url)
        return "<html></html>"


class StubExtractor(BaseExtractor):
    """Extractor returning canned records (or raising)."""

    def __init__(self, name, records=None, error=None, requires_browser=False):
        super().__init__(name, f"https://boards.example.com/{name}")
        self.records = records or []
        self.error = error
        self.requires_browser = requires_browser
        self.extract_calls = 0

    def extract(self, document):
        self.extract_calls += 1
        if self.error:
            raise self.error
        return list(self.records)


def extracted(company="Acme", title="Senior Backend Engineer", source="stub", job_id="1"):
    return ExtractedRole(
        role=make_role(company, title), source=make_source(source=source, source_role_id=job_id)
    )


@pytest.fixture
def static_fetcher():
    return FakeFetcher()


@pytest.fixture
def rendered_fetcher():
    return FakeFetcher()


@pytest.fixture
def runner(memory_store, clock, static_fetcher, rendered_fetcher):
    return ScrapeRunner(RoleReconciler(memory_store, clock=clock), static_fetcher, rendered_fetcher)


class TestRunExtractor:
    """Test single-extractor isolation."""

    def test_success(self, runner):
        result = runner.run_extractor(StubExtractor("ok", [extracted()]))
        assert result.success
        assert len(result.roles) == 1
        assert result.error is None
        assert result.duration_seconds >= 0

    def test_failure_is_captured(self, runner):
        result = runner.run_extractor(StubExtractor("bad", error=FetchError("HTTP 503")))
        assert not result.success
        assert result.roles == []
        assert "HTTP 503" in result.error

    def test_unexpected_exceptions_are_captured(self, runner):
        result = runner.run_extractor(StubExtractor("bad", error=ZeroDivisionError("oops")))
        assert not result.success
        assert result.error.startswith("ZeroDivisionError")

    def test_fetcher_choice(self, runner, static_fetcher, rendered_fetcher):
        runner.run_extractor(StubExtractor("static"))
        runner.run_extractor(StubExtractor("browser", requires_browser=True))
        assert static_fetcher.loaded == ["https://boards.example.com/static"]
        assert rendered_fetcher.loaded == ["https://boards.example.com/browser"]

    def test_browser_required_but_missing(self, memory_store, static_fetcher):
        runner = ScrapeRunner(RoleReconciler(memory_store), static_fetcher, None)
        result = runner.run_extractor(StubExtractor("browser", requires_browser=True))
        assert not result.success
        assert "needs a browser" in result.error


class TestRunAll:
    """Test full passes."""

    def test_failures_do_not_affect_other_sources(self, runner, memory_store):
        extractors = [
            StubExtractor("first", [extracted(job_id="1"), extracted("Coast", "Frontend Developer", job_id="2")]),
            StubExtractor("broken", error=FetchError("timeout")),
            StubExtractor("last", [extracted("Ramp", "Data Analyst Lead", source="other", job_id="9")]),
        ]

        summary = runner.run_all(extractors)

        assert summary.success_count == 2
        assert summary.failure_count == 1
        assert summary.total_jobs == 3
        assert summary.new_roles == 3
        assert summary.new_sources == 3
        assert len(summary.errors) == 1
        assert summary.errors[0].startswith("broken:")
        assert summary.finished_at is not None
        assert memory_store.role_count == 3

    def test_rerun_is_idempotent(self, runner, memory_store):
        extractors = [StubExtractor("first", [extracted(job_id="1"), extracted(job_id="2")])]

        first = runner.run_all(extractors)
        second = runner.run_all(extractors)

        assert first.new_roles == 1
        assert first.new_sources == 2
        assert second.new_roles == 0
        assert second.existing_roles == 2
        assert second.updated_sources == 2
        assert memory_store.role_count == 1
        assert memory_store.source_count == 2

    def test_record_errors_are_skipped(self, static_fetcher):
        reconciler = Mock()
        reconciler.upsert.side_effect = [
            PersistenceError("write failed"),
            UpsertOutcome(role_id="r2", created=True, source_created=True),
        ]
        runner = ScrapeRunner(reconciler, static_fetcher)

        summary = runner.run_all([StubExtractor("first", [extracted(job_id="1"), extracted(job_id="2")])])

        assert summary.skipped_records == 1
        assert summary.new_roles == 1
        assert summary.success_count == 1

    def test_role_deleted_mid_run_is_skipped(self, memory_store, clock, static_fetcher):
        stale = memory_store.create_role(make_role(), NOW)
        memory_store.delete_role(stale.id)
        store = MagicMock(wraps=memory_store)
        store.find_role_by_identity.side_effect = [stale, None]
        runner = ScrapeRunner(RoleReconciler(store, clock=clock), static_fetcher)

        records = [extracted(job_id="1"), extracted(title="Staff Backend Engineer", job_id="2")]
        summary = runner.run_all([StubExtractor("first", records)])

        assert summary.skipped_records == 1
        assert summary.new_roles == 1
        assert summary.success_count == 1
        assert memory_store.source_count == 1

    def test_store_unavailable_aborts_run(self, static_fetcher):
        reconciler = Mock()
        reconciler.upsert.side_effect = StoreUnavailableError("firestore down")
        runner = ScrapeRunner(reconciler, static_fetcher)
        later = StubExtractor("later", [extracted(job_id="2")])

        with pytest.raises(StoreUnavailableError):
            runner.run_all([StubExtractor("first", [extracted(job_id="1")]), later])

        assert later.extract_calls == 0

    def test_delay_between_sources(self, memory_store, static_fetcher):
        runner = ScrapeRunner(RoleReconciler(memory_store), static_fetcher, delay_between_sources=1.5)
        with patch("role_tracker.scrape_runner.time.sleep") as mock_sleep:
            runner.run_all([StubExtractor("a"), StubExtractor("b"), StubExtractor("c")])
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(1.5)
