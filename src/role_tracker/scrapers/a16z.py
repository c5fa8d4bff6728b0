"""Andreessen Horowitz portfolio job board extractor (rendered page)."""

import logging
import re
from typing import List, Optional, Sequence
from urllib.parse import urlencode

from bs4 import BeautifulSoup, Tag

from role_tracker.fetchers.base import FetchOptions
from role_tracker.models import ExtractedRole, WorkMode
from role_tracker.parsing import normalize_text, parse_company_size, parse_funding_stage
from role_tracker.scrapers.base import BaseExtractor, Candidate
from role_tracker.scrapers.strategies import element_text, run_strategies

logger = logging.getLogger(__name__)

A16Z_JOBS_URL = "https://jobs.a16z.com/jobs"
JOB_CARD_SELECTOR = ".job-list-job-details"

# "Foster City, California, USA"
_LOCATION = re.compile(r"(?:Hybrid|Remote|Onsite)?\s*([A-Z][a-zA-Z\s,]+(?:USA|US|UK|GB|CA|India|Remote))")
# Category text sits between the posted phrase and the stage/size band
_INDUSTRY = re.compile(r"Posted.*?ago\s*([A-Za-z\s&]+?)\s*(?:\d+\s*[–-]\s*\d+|Seed|Series|Pre-Seed)", re.IGNORECASE)


class A16zExtractor(BaseExtractor):
    """
    Extractor for jobs.a16z.com.

    The board is client-rendered with infinite scroll, so it is loaded
    through the rendered fetcher and scrolled until the card count stops
    growing.

    Args:
        job_types: "jobTypes" filter values (default: Software Engineer)
        posted_since: ISO-8601 duration filter, e.g. "P7D"
        locations: Optional "locations" filter values
        seniority: Optional "seniority" filter values
    """

    requires_browser = True

    def __init__(
        self,
        name: str = "Andreessen Horowitz",
        source_url: str = A16Z_JOBS_URL,
        job_types: Optional[Sequence[str]] = None,
        posted_since: str = "P7D",
        locations: Optional[Sequence[str]] = None,
        seniority: Optional[Sequence[str]] = None,
        **kwargs,
    ):
        kwargs.setdefault("source", "a16z")
        kwargs.setdefault(
            "fetch_options",
            FetchOptions(
                wait_for_selector=JOB_CARD_SELECTOR,
                timeout_ms=30000,
                scroll_to_load=True,
                max_scrolls=50,
            ),
        )
        super().__init__(name, source_url, **kwargs)
        self.job_types = list(job_types) if job_types is not None else ["Software Engineer"]
        self.posted_since = posted_since
        self.locations = list(locations or [])
        self.seniority = list(seniority or [])

    def target_url(self) -> str:
        params = {}
        if self.job_types:
            params["jobTypes"] = "+".join(self.job_types)
        if self.posted_since:
            params["postedSince"] = self.posted_since
        if self.locations:
            params["locations"] = "+".join(self.locations)
        if self.seniority:
            params["seniority"] = "+".join(self.seniority)
        if not params:
            return self.source_url
        return f"{self.source_url}?{urlencode(params)}"

    def extract(self, document: str) -> List[ExtractedRole]:
        soup = BeautifulSoup(document, "html.parser")
        records = run_strategies(soup, [self._card_strategy], self.build_records)
        logger.info(f"[{self.name}] Extracted {len(records)} roles")
        return self.dedupe(records)

    def _card_strategy(self, soup: BeautifulSoup) -> List[Candidate]:
        cards = soup.select(JOB_CARD_SELECTOR)
        logger.debug(f"[{self.name}] Found {len(cards)} job containers")
        candidates = []
        for card in cards:
            candidate = self._parse_card(card)
            if candidate:
                candidates.append(candidate)
        return candidates

    def _parse_card(self, card: Tag) -> Optional[Candidate]:
        company = element_text(card.select_one(".job-list-job-company-link"))
        title_link = card.select_one(".job-list-job-title a")
        title = element_text(title_link)
        link = title_link.get("href", "") if title_link is not None else ""
        if not company or not title or not link:
            return None

        text = element_text(card)

        location_match = _LOCATION.search(text)
        location = normalize_text(location_match.group(1)) if location_match else "Remote"

        work_mode = WorkMode.ONSITE
        if "Hybrid" in text:
            work_mode = WorkMode.HYBRID
        if "Remote" in text:
            work_mode = WorkMode.REMOTE

        industry_match = _INDUSTRY.search(text)

        return Candidate(
            title=title,
            link=link,
            company=company,
            location=location,
            compensation=text,
            posted_text=text,
            funding_stage=parse_funding_stage(text),
            company_size=parse_company_size(text),
            industry=normalize_text(industry_match.group(1)) if industry_match else None,
            work_mode=work_mode,
        )
