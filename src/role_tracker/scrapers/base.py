"""Base extractor class for all job board extractors."""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urljoin

from role_tracker.fetchers.base import FetchAdapter, FetchOptions
from role_tracker.filters.validity import JobValidityClassifier
from role_tracker.models import ExtractedRole, RoleLevel, RoleRecord, SourceRecord, WorkMode
from role_tracker.parsing import (
    NOT_SPECIFIED,
    clean_title,
    extract_company_name,
    extract_role_level,
    infer_work_mode,
    mentions_equity,
    normalize_text,
    parse_posting_date,
    parse_salary,
    truncate,
)

logger = logging.getLogger(__name__)

# Company text that is really the board talking about itself
PLACEHOLDER_COMPANIES = {"", "unknown", "y combinator"}

# Card text kept as role_description
MAX_DESCRIPTION_LENGTH = 4000


@dataclass
class Candidate:
    """
    Raw fields pulled from one card, link or API row before cleanup.

    Only title and link are required. Anything an extractor already knows
    precisely (a native job id, a structured salary, a seniority flag)
    goes in the optional typed fields and wins over text parsing.
    """

    title: str
    link: str
    company: str = ""
    location: str = ""
    compensation: str = ""
    description: str = ""
    company_description: str = ""
    posted_text: str = ""

    source_role_id: Optional[str] = None
    company_domain: Optional[str] = None
    industry: Optional[str] = None
    funding_stage: Optional[str] = None
    company_size: Optional[str] = None
    work_mode: Optional[WorkMode] = None
    role_level: Optional[RoleLevel] = None
    posting_date: Optional[datetime] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    offers_equity: Optional[bool] = None
    raw_payload: Optional[Dict[str, Any]] = None


def slugify(name: str) -> str:
    """Lowercase identifier for a board name ("Work at a Startup" -> "work-at-a-startup")."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class BaseExtractor(ABC):
    """
    Abstract base class for job board extractors.

    Subclasses implement extract(document) and build Candidate objects;
    build_record() turns each candidate into a validated ExtractedRole.

    Attributes:
        name: Display name used in logs and run summaries
        source: Identifier written to RoleSource.source
        source_url: Board listing URL
        funding_stage: Stage label stamped on every role (VC boards)
        requires_browser: True when the page is client-rendered
        fetch_options: Options passed to the fetcher
    """

    requires_browser = True
    default_work_mode = WorkMode.REMOTE

    def __init__(
        self,
        name: str,
        source_url: str,
        source: Optional[str] = None,
        funding_stage: Optional[str] = None,
        fetch_options: Optional[FetchOptions] = None,
        classifier: Optional[JobValidityClassifier] = None,
        max_candidates: int = 50,
    ):
        self.name = name
        self.source_url = source_url
        self.source = source or slugify(name)
        self.funding_stage = funding_stage
        self.fetch_options = fetch_options or FetchOptions()
        self.classifier = classifier or JobValidityClassifier()
        self.max_candidates = max_candidates

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, source_url={self.source_url!r})"

    def target_url(self) -> str:
        """URL actually loaded (may add query filters to source_url)."""
        return self.source_url

    def load(self, fetcher: FetchAdapter) -> str:
        """Load this board's document through the given fetcher."""
        return fetcher.load(self.target_url(), self.fetch_options)

    def scrape(self, fetcher: FetchAdapter) -> List[ExtractedRole]:
        """Load the board and extract its roles."""
        document = self.load(fetcher)
        return self.extract(document)

    @abstractmethod
    def extract(self, document: str) -> List[ExtractedRole]:
        """
        Extract roles from a loaded document.

        Args:
            document: Page markup (or JSON text for API extractors)

        Returns:
            Validated, de-duplicated role/source pairs.
        """
        pass

    def absolute_url(self, link: str) -> str:
        """Resolve a relative href against the board URL."""
        link = (link or "").strip()
        if not link or link.startswith(("http://", "https://")):
            return link
        if link.startswith(("#", "mailto:", "javascript:")):
            return link
        return urljoin(self.source_url.rstrip("/") + "/", link)

    def resolve_company(self, company: str, title: str, link: str) -> str:
        """
        Pick a company name, falling back to title/URL heuristics.

        Returns "" when nothing better than the title itself was found.
        """
        company = normalize_text(company)
        lowered = company.lower()
        if (
            lowered not in PLACEHOLDER_COMPANIES
            and len(company) >= 2
            and lowered != self.name.lower()
        ):
            return company

        resolved = extract_company_name(title, link)
        if resolved and resolved != title and resolved.lower() != self.name.lower():
            return resolved
        return ""

    def build_record(self, candidate: Candidate) -> Optional[ExtractedRole]:
        """
        Clean, enrich and validate one candidate.

        Returns:
            ExtractedRole, or None when the candidate fails validation.
        """
        title = clean_title(candidate.title)
        link = self.absolute_url(candidate.link)
        company = self.resolve_company(candidate.company, title, link)

        result = self.classifier.evaluate(title, company, link)
        if not result.passed:
            logger.debug(f"[{self.name}] Dropped '{title}': {result.get_rejection_summary()}")
            return None

        location = normalize_text(candidate.location) or None
        description = normalize_text(candidate.description)

        if candidate.salary_min is not None or candidate.salary_max is not None:
            salary_min = candidate.salary_min
            salary_max = candidate.salary_max
            currency = candidate.salary_currency
            compensation_text = normalize_text(candidate.compensation) or NOT_SPECIFIED
        else:
            salary = parse_salary(candidate.compensation or description)
            salary_min, salary_max, currency = salary.min, salary.max, salary.currency
            compensation_text = salary.display_text

        offers_equity = candidate.offers_equity
        if offers_equity is None:
            offers_equity = mentions_equity(f"{candidate.compensation} {description}")

        role = RoleRecord(
            company_name=company,
            company_domain=candidate.company_domain,
            industry=candidate.industry,
            funding_stage=candidate.funding_stage or self.funding_stage,
            company_size=candidate.company_size,
            role_title=title,
            role_level=candidate.role_level or extract_role_level(title, description),
            work_mode=candidate.work_mode or infer_work_mode(location, self.default_work_mode),
            location=location,
            compensation_text=compensation_text,
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=currency,
            offers_equity=offers_equity,
            company_description=normalize_text(candidate.company_description) or None,
            role_description=truncate(description, MAX_DESCRIPTION_LENGTH) or None,
            posting_date=candidate.posting_date or parse_posting_date(candidate.posted_text),
        )
        source = SourceRecord(
            source=self.source,
            source_role_id=candidate.source_role_id or link,
            source_url=self.source_url,
            application_url=link,
            raw_payload=candidate.raw_payload,
        )
        return ExtractedRole(role=role, source=source)

    def build_records(self, candidates: Iterable[Candidate]) -> List[ExtractedRole]:
        """Build every candidate, keeping the ones that validate."""
        records = []
        for candidate in candidates:
            record = self.build_record(candidate)
            if record:
                records.append(record)
        return records

    @staticmethod
    def dedupe(records: Iterable[ExtractedRole]) -> List[ExtractedRole]:
        """
        Drop repeated postings by source_role_id.

        The last occurrence wins; order follows first appearance.
        """
        unique: Dict[str, ExtractedRole] = {}
        for record in records:
            unique[record.source.source_role_id] = record
        return list(unique.values())
