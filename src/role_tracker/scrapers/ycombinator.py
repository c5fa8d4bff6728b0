"""Y Combinator job board extractor.

Reads the server-rendered https://www.ycombinator.com/jobs listing. Every
posting card carries an Apply button whose href embeds the Work at a
Startup job id (``signup_job_id%3D<id>``); that id is the stable
source_role_id.
"""

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from role_tracker.models import ExtractedRole, WorkMode
from role_tracker.parsing import parse_yc_company_label
from role_tracker.scrapers.base import BaseExtractor, Candidate
from role_tracker.scrapers.strategies import element_text, link_strategy, run_strategies

logger = logging.getLogger(__name__)

YC_JOBS_URL = "https://www.ycombinator.com/jobs"
APPLY_URL_TEMPLATE = "https://www.workatastartup.com/companies?signup_job_id={job_id}"

_JOB_ID = re.compile(r"signup_job_id(?:%3D|=)(\d+)")
_LOCATION = re.compile(
    r"(Remote|San Francisco|New York|Boston|London|Seattle|Mountain View|Bangalore|"
    r"India|US|UK|CA|England|GB|Atlanta)[^•]*",
    re.IGNORECASE,
)


class YCombinatorExtractor(BaseExtractor):
    """Extractor for the YC job board (static HTML).

    Usage:
        extractor = YCombinatorExtractor()
        roles = extractor.scrape(StaticFetcher())
    """

    requires_browser = False

    def __init__(self, name: str = "Y Combinator", source_url: str = YC_JOBS_URL, **kwargs):
        kwargs.setdefault("source", "ycombinator")
        super().__init__(name, source_url, **kwargs)

    def extract(self, document: str) -> List[ExtractedRole]:
        soup = BeautifulSoup(document, "html.parser")
        records = run_strategies(
            soup,
            [self._apply_button_strategy, link_strategy('a[href*="/jobs/"]')],
            self.build_records,
        )
        logger.info(f"[{self.name}] Extracted {len(records)} roles")
        return self.dedupe(records)

    def _apply_button_strategy(self, soup: BeautifulSoup) -> List[Candidate]:
        candidates = []
        for button in soup.select('a[href*="signup_job_id"]'):
            candidate = self._parse_card(button)
            if candidate:
                candidates.append(candidate)
        return candidates

    def _parse_card(self, button: Tag) -> Optional[Candidate]:
        match = _JOB_ID.search(button.get("href", ""))
        if not match:
            return None
        job_id = match.group(1)

        card = button.parent.parent if button.parent is not None else None
        if card is None:
            return None

        company_link = None
        for link in card.select('a[href*="/companies/"]'):
            if element_text(link):
                company_link = link
                break
        if company_link is None:
            return None

        company_text = element_text(company_link)
        label = parse_yc_company_label(company_text)
        if label is None:
            return None

        title = element_text(card.select_one('a.text-linkColor, a[class*="text-sm font-semibold"]'))
        if len(title) < 10:
            return None

        details_text = element_text(card.select_one("div.flex.flex-wrap"))
        location = "Remote"
        location_match = _LOCATION.search(details_text)
        if location_match:
            location = location_match.group(0).replace("•", " ").strip()

        return Candidate(
            title=title,
            link=APPLY_URL_TEMPLATE.format(job_id=job_id),
            company=label.name,
            location=location,
            compensation=details_text,
            company_description=label.description or "",
            posted_text=f"({label.posted_text})" if label.posted_text else "",
            source_role_id=job_id,
            funding_stage=f"YC {label.batch}",
            work_mode=WorkMode.REMOTE if "remote" in location.lower() else WorkMode.HYBRID,
            raw_payload={
                "job_id": job_id,
                "company_label": company_text,
                "company_url": company_link.get("href", ""),
                "details": details_text,
            },
        )
