"""a16z job board API extractor.

Uses the board's JSON search endpoint instead of rendering the page, so
no browser is needed and native job ids are available.

API endpoint: https://jobs.a16z.com/api-boards/search-jobs
"""

import json
import logging
from typing import Any, Dict, List, Optional

from role_tracker.exceptions import ExtractionError
from role_tracker.fetchers.base import FetchAdapter
from role_tracker.models import ExtractedRole, RoleLevel, WorkMode
from role_tracker.parsing import extract_role_level, parse_iso_date
from role_tracker.scrapers.base import BaseExtractor, Candidate

logger = logging.getLogger(__name__)

A16Z_API_URL = "https://jobs.a16z.com/api-boards/search-jobs"
A16Z_BOARD_ID = "andreessen-horowitz"


def seniority_to_level(seniority: Optional[str], title: str) -> RoleLevel:
    """Map the board's seniority value to a role level, falling back to the title."""
    value = (seniority or "").lower()
    if "entry" in value or "junior" in value:
        return RoleLevel.ENTRY
    if "senior" in value or "expert" in value or "lead" in value:
        return RoleLevel.SENIOR
    if "mid" in value:
        return RoleLevel.MID
    return extract_role_level(title)


def format_compensation(minimum: Optional[float], maximum: Optional[float], currency: str, period: str) -> str:
    """Render "USD 265,000 - 340,000/year" from structured salary fields."""
    suffix = "/year" if period == "year" else ""
    return f"{currency} {minimum:,.0f} - {maximum:,.0f}{suffix}"


class A16zApiExtractor(BaseExtractor):
    """Extractor for the a16z search-jobs API.

    Usage:
        extractor = A16zApiExtractor(page_size=500)
        roles = extractor.scrape(StaticFetcher())
    """

    requires_browser = False

    def __init__(
        self,
        name: str = "Andreessen Horowitz (API)",
        source_url: str = A16Z_API_URL,
        page_size: int = 500,
        board_id: str = A16Z_BOARD_ID,
        **kwargs,
    ):
        kwargs.setdefault("source", "a16z")
        super().__init__(name, source_url, **kwargs)
        self.page_size = page_size
        self.board_id = board_id

    def build_payload(self) -> Dict[str, Any]:
        return {
            "meta": {"size": self.page_size},
            "board": {"id": self.board_id, "isParent": True},
            "query": {"promoteFeatured": True},
        }

    def load(self, fetcher: FetchAdapter) -> str:
        post_json = getattr(fetcher, "post_json", None)
        if post_json is None:
            raise ExtractionError(f"{self.name} needs a fetcher that can POST JSON")
        data = post_json(self.source_url, self.build_payload())
        return json.dumps(data)

    def extract(self, document: str) -> List[ExtractedRole]:
        try:
            data = json.loads(document) if document else {}
        except ValueError as e:
            raise ExtractionError(f"{self.name} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ExtractionError(f"{self.name} returned unexpected payload type {type(data).__name__}")

        jobs = data.get("jobs") or []
        logger.info(f"[{self.name}] API returned {len(jobs)} jobs (total: {data.get('total', '?')})")

        candidates = []
        for job in jobs:
            try:
                candidates.append(self.parse_job(job))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                job_id = job.get("jobId", "?") if isinstance(job, dict) else "?"
                logger.warning(f"[{self.name}] Failed to parse job {job_id}: {e}")

        return self.dedupe(self.build_records(candidates))

    def parse_job(self, job: Dict[str, Any]) -> Candidate:
        """Map one API job object onto a Candidate."""
        title = job.get("title") or ""

        normalized = job.get("normalizedLocations") or []
        raw_locations = job.get("locations") or []
        location = ""
        if normalized and normalized[0].get("label"):
            location = normalized[0]["label"]
        elif raw_locations:
            location = raw_locations[0]

        if job.get("remote"):
            work_mode = WorkMode.REMOTE
        elif job.get("hybrid"):
            work_mode = WorkMode.HYBRID
        elif location:
            work_mode = WorkMode.ONSITE
        else:
            work_mode = None

        salary = job.get("salary") or {}
        salary_min = salary.get("minValue") or None
        salary_max = salary.get("maxValue") or None
        currency = None
        compensation = ""
        if salary:
            currency = (salary.get("currency") or {}).get("value") or "USD"
            if salary_min and salary_max:
                period = (salary.get("period") or {}).get("value") or ""
                compensation = format_compensation(salary_min, salary_max, currency, period)

        staff_count = job.get("companyStaffCount")

        seniorities = job.get("jobSeniorities") or []
        seniority = seniorities[0].get("value") if seniorities else None

        return Candidate(
            title=title,
            link=job.get("applyUrl") or "",
            company=job.get("companyName") or "",
            location=location,
            compensation=compensation,
            source_role_id=str(job["jobId"]) if job.get("jobId") else None,
            company_domain=job.get("companyDomain") or None,
            industry=", ".join(job.get("departments") or []) or None,
            company_size=f"{staff_count} employees" if staff_count else None,
            work_mode=work_mode,
            role_level=seniority_to_level(seniority, title),
            posting_date=parse_iso_date(job.get("timeStamp")),
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=currency if salary_min or salary_max else None,
            raw_payload={
                "company_domain": job.get("companyDomain"),
                "company_staff_count": job.get("companyStaffCount"),
                "job_types": [t.get("label") for t in job.get("jobTypes") or []],
                "departments": job.get("departments") or [],
                "skills": [s.get("label") for s in job.get("skills") or []],
                "remote": job.get("remote"),
                "hybrid": job.get("hybrid"),
            },
        )
