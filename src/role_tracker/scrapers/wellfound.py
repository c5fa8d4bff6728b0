"""Wellfound (formerly AngelList Talent) extractor."""

import logging
from typing import List

from bs4 import BeautifulSoup

from role_tracker.fetchers.base import FetchOptions
from role_tracker.models import ExtractedRole
from role_tracker.scrapers.base import BaseExtractor
from role_tracker.scrapers.strategies import link_strategy, run_strategies, structured_strategy

logger = logging.getLogger(__name__)

WELLFOUND_URL = "https://wellfound.com/role/l/software-engineer"


class WellfoundExtractor(BaseExtractor):
    """Extractor for wellfound.com role listings (rendered)."""

    requires_browser = True

    def __init__(self, name: str = "Wellfound (AngelList)", source_url: str = WELLFOUND_URL, **kwargs):
        kwargs.setdefault("source", "wellfound")
        kwargs.setdefault("fetch_options", FetchOptions(settle_ms=3000))
        super().__init__(name, source_url, **kwargs)
        self.strategies = [
            structured_strategy(
                container_selectors=[
                    '[class*="JobCard"], [class*="job-card"], [data-testid*="job"], article'
                ],
                title_selector='h2, h3, [class*="title"], a',
                link_selector='a[href*="/role/"], a[href*="/job/"], a[href*="/jobs/"]',
                min_text_length=0,
                limit=self.max_candidates,
            ),
            link_strategy(
                link_selector='a[href*="/role/"], a[href*="/job/"], a[href*="/jobs/"]',
                limit=self.max_candidates,
            ),
        ]

    def extract(self, document: str) -> List[ExtractedRole]:
        soup = BeautifulSoup(document, "html.parser")
        records = run_strategies(soup, self.strategies, self.build_records)
        logger.info(f"[{self.name}] Extracted {len(records)} roles")
        return self.dedupe(records)
