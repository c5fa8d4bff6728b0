"""Generic extractor for aggregators and VC portfolio job boards.

Most portfolio boards run on a handful of hosted platforms with similar
markup, so one layered selector chain covers them.
"""

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from role_tracker.fetchers.base import FetchOptions
from role_tracker.models import ExtractedRole, WorkMode
from role_tracker.scrapers.base import BaseExtractor, Candidate
from role_tracker.scrapers.strategies import (
    CONTAINER_SELECTORS,
    JOB_LINK_SELECTOR,
    link_strategy,
    run_strategies,
    structured_strategy,
)

logger = logging.getLogger(__name__)

_COMPANY_BEFORE_JOBS = re.compile(r"https?://[^/]+/([^/]+)/jobs?(?:/|$)")
_TITLE_WORDS = ["engineer", "developer", "manager", "designer", "analyst", "specialist"]


class GenericVCExtractor(BaseExtractor):
    """
    Layered extractor for boards without a dedicated implementation.

    Cards without a location are listed as Remote; any other location
    that does not mention remote is recorded as Hybrid.
    """

    requires_browser = True

    def __init__(self, name: str, source_url: str, **kwargs):
        kwargs.setdefault("fetch_options", FetchOptions(settle_ms=4000))
        super().__init__(name, source_url, **kwargs)
        self.strategies = [
            structured_strategy(CONTAINER_SELECTORS, limit=self.max_candidates),
            link_strategy(JOB_LINK_SELECTOR, limit=self.max_candidates),
        ]

    def resolve_company(self, company: str, title: str, link: str) -> str:
        resolved = super().resolve_company(company, title, link)

        if not resolved:
            # /acme/jobs/123 on multi-company boards
            match = _COMPANY_BEFORE_JOBS.match(link)
            if match and len(match.group(1)) > 2:
                slug = match.group(1)
                resolved = slug[:1].upper() + slug[1:]

        lowered = resolved.lower()
        if "jobs" in lowered or "careers" in lowered:
            parts = [p.strip() for p in title.split(" - ") if p.strip()]
            if len(parts) > 1 and not any(word in parts[0].lower() for word in _TITLE_WORDS):
                return parts[0]
        return resolved

    def build_record(self, candidate: Candidate) -> Optional[ExtractedRole]:
        if not candidate.location.strip():
            candidate.location = "Remote"
        if candidate.work_mode is None:
            remote = "remote" in candidate.location.lower()
            candidate.work_mode = WorkMode.REMOTE if remote else WorkMode.HYBRID
        return super().build_record(candidate)

    def extract(self, document: str) -> List[ExtractedRole]:
        soup = BeautifulSoup(document, "html.parser")
        records = run_strategies(soup, self.strategies, self.build_records)
        logger.info(f"[{self.name}] Extracted {len(records)} roles")
        return self.dedupe(records)
