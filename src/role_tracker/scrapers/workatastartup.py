"""Work at a Startup extractor."""

import logging
from typing import List

from bs4 import BeautifulSoup

from role_tracker.fetchers.base import FetchOptions
from role_tracker.models import ExtractedRole
from role_tracker.scrapers.base import BaseExtractor
from role_tracker.scrapers.strategies import link_strategy, run_strategies, structured_strategy

logger = logging.getLogger(__name__)

WAAS_JOBS_URL = "https://www.workatastartup.com/jobs"


class WorkAtAStartupExtractor(BaseExtractor):
    """Extractor for workatastartup.com (rendered)."""

    requires_browser = True

    def __init__(self, name: str = "Work at a Startup", source_url: str = WAAS_JOBS_URL, **kwargs):
        kwargs.setdefault("source", "workatastartup")
        kwargs.setdefault("fetch_options", FetchOptions(settle_ms=3000))
        super().__init__(name, source_url, **kwargs)
        self.strategies = [
            structured_strategy(
                container_selectors=[
                    '.job-card, [class*="job"], article, .listing, [class*="Job"], [data-testid*="job"]'
                ],
                title_selector='h2, h3, .title, [class*="title"], a',
                company_selector='.company, [class*="company"], .company-name, [class*="Company"]',
                location_selector='.location, [class*="location"], .remote, [class*="Location"]',
                compensation_selector='.salary, [class*="salary"], [class*="compensation"]',
                link_selector='a[href*="/jobs/"], a[href*="/companies/"], a[href*="/job/"], a',
                min_text_length=0,
                limit=self.max_candidates,
            ),
            link_strategy(
                link_selector='a[href*="/job"], a[href*="/company"]',
                limit=self.max_candidates,
            ),
        ]

    def extract(self, document: str) -> List[ExtractedRole]:
        soup = BeautifulSoup(document, "html.parser")
        records = run_strategies(soup, self.strategies, self.build_records)
        logger.info(f"[{self.name}] Extracted {len(records)} roles")
        return self.dedupe(records)
