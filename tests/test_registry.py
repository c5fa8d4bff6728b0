"""Tests for building extractors from the sources list."""

from pathlib import Path

import pytest

from role_tracker.filters.validity import JobValidityClassifier
from role_tracker.scrapers.a16z_api import A16zApiExtractor
from role_tracker.scrapers.ashby import AshbyExtractor
from role_tracker.scrapers.generic_vc import GenericVCExtractor
from role_tracker.scrapers.registry import build_extractor, build_extractors, load_sources
from role_tracker.scrapers.ycombinator import YCombinatorExtractor

SOURCES_FILE = Path(__file__).parent.parent / "config" / "sources.yaml"


class TestLoadSources:
    def test_shipped_sources_file(self):
        entries = load_sources(SOURCES_FILE)
        assert entries[0]["type"] == "ycombinator"
        assert all("type" in entry for entry in entries)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_sources(tmp_path / "nope.yaml")

    def test_requires_sources_list(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("sources: {}\n")
        with pytest.raises(ValueError):
            load_sources(path)


class TestBuildExtractor:
    """Test single entry construction."""

    def test_dedicated_type(self):
        extractor = build_extractor({"type": "ycombinator", "name": "Y Combinator"})
        assert isinstance(extractor, YCombinatorExtractor)
        assert extractor.source == "ycombinator"

    def test_extra_keys_are_constructor_arguments(self):
        extractor = build_extractor({"type": "a16z_api", "page_size": 25})
        assert isinstance(extractor, A16zApiExtractor)
        assert extractor.page_size == 25

    def test_generic_entry(self):
        extractor = build_extractor(
            {
                "type": "generic_vc",
                "name": "Accel",
                "url": "https://jobs.accel.com/",
                "funding_stage": "Accel",
                "fetch": {"settle_ms": 500, "wait_for_selector": ".job"},
            }
        )
        assert isinstance(extractor, GenericVCExtractor)
        assert extractor.source_url == "https://jobs.accel.com/"
        assert extractor.funding_stage == "Accel"
        assert extractor.fetch_options.settle_ms == 500
        assert extractor.fetch_options.wait_for_selector == ".job"

    def test_type_defaults_to_generic(self):
        extractor = build_extractor({"name": "Startup Jobs", "url": "https://startup.jobs"})
        assert isinstance(extractor, GenericVCExtractor)

    def test_shared_classifier(self):
        classifier = JobValidityClassifier()
        entry = {"type": "ashby", "name": "Linear", "url": "https://jobs.ashbyhq.com/linear"}
        extractor = build_extractor(entry, classifier)
        assert isinstance(extractor, AshbyExtractor)
        assert extractor.classifier is classifier

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown extractor type"):
            build_extractor({"type": "lever", "name": "Acme", "url": "https://jobs.lever.co/acme"})

    def test_generic_needs_name_and_url(self):
        with pytest.raises(ValueError):
            build_extractor({"type": "generic_vc", "name": "Nameless"})


class TestBuildExtractors:
    ENTRIES = [
        {"type": "ycombinator", "name": "Y Combinator"},
        {"type": "a16z", "name": "Andreessen Horowitz", "enabled": False},
        {"type": "generic_vc", "name": "Sequoia Capital", "url": "https://www.sequoiacap.com/jobs"},
        {"type": "ashby", "name": "Perplexity", "url": "https://jobs.ashbyhq.com/perplexity"},
    ]

    def test_disabled_entries_are_skipped(self):
        extractors = build_extractors(self.ENTRIES)
        assert [e.name for e in extractors] == ["Y Combinator", "Sequoia Capital", "Perplexity"]

    def test_name_filter_matches_name_or_source(self):
        extractors = build_extractors(self.ENTRIES, names=["sequoia-capital", "PERPLEXITY"])
        assert [e.source for e in extractors] == ["sequoia-capital", "perplexity"]

    def test_shipped_sources_build(self):
        extractors = build_extractors(load_sources(SOURCES_FILE))
        sources = [e.source for e in extractors]
        assert "ycombinator" in sources
        assert "a16z" in sources
        assert len(sources) == len(set(sources))
