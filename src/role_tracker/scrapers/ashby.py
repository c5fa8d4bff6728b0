"""Extractor for job boards hosted on AshbyHQ.

Ashby boards live at ``<company>.ashbyhq.com`` or
``jobs.ashbyhq.com/<company>``; either way the hiring company comes from
the board URL rather than the page.
"""

import logging
import re
from typing import List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from role_tracker.fetchers.base import FetchOptions
from role_tracker.models import ExtractedRole
from role_tracker.scrapers.base import BaseExtractor, Candidate
from role_tracker.scrapers.strategies import link_strategy, run_strategies, structured_strategy

logger = logging.getLogger(__name__)

_SUBDOMAIN = re.compile(r"^([^.]+)\.ashbyhq\.com$")


def company_from_board_url(url: str) -> Optional[str]:
    """
    Company name encoded in an Ashby board URL.

    Example:
        >>> company_from_board_url("https://perplexity.ashbyhq.com")
        'Perplexity'
        >>> company_from_board_url("https://jobs.ashbyhq.com/linear")
        'Linear'
    """
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()

    match = _SUBDOMAIN.match(host)
    if match and match.group(1) not in ("jobs", "www", "app"):
        slug = match.group(1)
    elif host == "jobs.ashbyhq.com":
        parts = [p for p in parsed.path.split("/") if p]
        if not parts:
            return None
        slug = parts[0]
    else:
        return None

    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)


class AshbyExtractor(BaseExtractor):
    """Extractor for a single company's Ashby board (rendered)."""

    requires_browser = True

    def __init__(self, name: str, source_url: str, **kwargs):
        kwargs.setdefault("fetch_options", FetchOptions(settle_ms=3000))
        super().__init__(name, source_url, **kwargs)
        self.company = company_from_board_url(source_url)
        self.strategies = [
            structured_strategy(
                container_selectors=[
                    '[class*="Job"], [class*="job"], [data-testid*="job"], article, .job-listing, .job-card'
                ],
                company_selector=None,
                location_selector='[class*="location"], [class*="Location"], [class*="remote"]',
                link_selector='a[href*="/jobs/"], a[href*="/job/"], a[href*="/apply"]',
                limit=self.max_candidates,
            ),
            link_strategy(
                link_selector='a[href*="/jobs/"], a[href*="/job/"]',
                company_selector=None,
                limit=self.max_candidates,
            ),
        ]

    def build_record(self, candidate: Candidate) -> Optional[ExtractedRole]:
        if self.company:
            candidate.company = self.company
        return super().build_record(candidate)

    def extract(self, document: str) -> List[ExtractedRole]:
        soup = BeautifulSoup(document, "html.parser")
        records = run_strategies(soup, self.strategies, self.build_records)
        logger.info(f"[{self.name}] Extracted {len(records)} roles")
        return self.dedupe(records)
