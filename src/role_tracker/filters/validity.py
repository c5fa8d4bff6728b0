"""
Job validity classifier.

Decides whether a (title, company, link) triple scraped from a board is a
real posting or navigation chrome, a category header or marketing copy.
Used at extraction time and again by the offline cleanup pass.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from role_tracker.filters.models import FilterResult
from role_tracker.filters.patterns import DEFAULT_PATTERNS, ValidityPatterns

logger = logging.getLogger(__name__)


class JobValidityClassifier:
    """
    Ordered heuristic checks over a candidate posting.

    Checks run in a fixed order and stop at the first failure:
    1. Title blocklist (category labels, calls to action, fragments)
    2. Title length and content
    3. Title word count and truncation artifacts
    4. Company name
    5. Link is an absolute http(s) URL
    6. Link path is not a listing/marketing page
    7. Keyword-less titles meet stricter length and copy rules
    """

    def __init__(self, patterns: Optional[ValidityPatterns] = None):
        self.patterns = patterns or DEFAULT_PATTERNS

    @property
    def version(self) -> str:
        return self.patterns.version

    def is_valid_job(self, title: Optional[str], company: Optional[str], link: Optional[str]) -> bool:
        """True when the triple passes every check."""
        return self.evaluate(title, company, link).passed

    def evaluate(
        self, title: Optional[str], company: Optional[str], link: Optional[str]
    ) -> FilterResult:
        """
        Run the checks and report the first one that failed.

        Args:
            title: Role title as extracted
            company: Company name as extracted
            link: Application or detail URL

        Returns:
            FilterResult with at most one rejection
        """
        title = title or ""
        company = company or ""
        link = link or ""

        result = FilterResult(passed=True, patterns_version=self.version)
        checks = (
            lambda: self._check_title_blocklist(title, result),
            lambda: self._check_title_length(title, result),
            lambda: self._check_title_words(title, result),
            lambda: self._check_company(company, result),
            lambda: self._check_link_url(link, result),
            lambda: self._check_link_path(link, result),
            lambda: self._check_keywordless_title(title, result),
        )
        for check in checks:
            check()
            if not result.passed:
                logger.debug(
                    f"Rejected candidate '{title}' / '{company}': {result.get_rejection_summary()}"
                )
                break

        return result

    def _check_title_blocklist(self, title: str, result: FilterResult) -> None:
        title_lower = title.lower().strip()
        for pattern in self.patterns.title_regexes:
            if pattern.search(title_lower):
                result.add_rejection(
                    filter_category="title",
                    filter_name="blocked_title",
                    reason="Title looks like page chrome",
                    detail=f"Title matches '{pattern.pattern}'",
                )
                return

    def _check_title_length(self, title: str, result: FilterResult) -> None:
        stripped = title.strip()
        if len(stripped) < self.patterns.min_title_length:
            result.add_rejection(
                filter_category="title",
                filter_name="min_length",
                reason="Title too short",
                detail=f"{len(stripped)} < {self.patterns.min_title_length} characters",
            )
        elif not any(ch.isalpha() for ch in stripped):
            result.add_rejection(
                filter_category="title",
                filter_name="no_letters",
                reason="Title has no letters",
                detail="Title is only digits, punctuation or whitespace",
            )

    def _check_title_words(self, title: str, result: FilterResult) -> None:
        words = title.split()
        if len(words) < self.patterns.min_title_words:
            result.add_rejection(
                filter_category="title",
                filter_name="min_words",
                reason="Title has too few words",
                detail=f"{len(words)} < {self.patterns.min_title_words} words",
            )
            return

        if title.strip().lower() in self.patterns.truncated_titles:
            result.add_rejection(
                filter_category="title",
                filter_name="truncated",
                reason="Title is truncated",
                detail=f"Bare '{title.strip()}'",
            )

    def _check_company(self, company: str, result: FilterResult) -> None:
        company_lower = company.lower().strip()
        if (
            not company_lower
            or company_lower == "unknown"
            or len(company_lower) < self.patterns.min_company_length
        ):
            result.add_rejection(
                filter_category="company",
                filter_name="missing_company",
                reason="Company missing",
                detail=f"Company '{company}' is empty, unknown or too short",
            )
            return

        for pattern in self.patterns.company_regexes:
            if pattern.search(company_lower):
                result.add_rejection(
                    filter_category="company",
                    filter_name="placeholder_company",
                    reason="Company is a board placeholder",
                    detail=f"Company matches '{pattern.pattern}'",
                )
                return

    def _check_link_url(self, link: str, result: FilterResult) -> None:
        if not link.startswith(("http://", "https://")):
            result.add_rejection(
                filter_category="link",
                filter_name="not_absolute",
                reason="Link is not an absolute URL",
                detail=f"Link '{link}'",
            )
            return

        try:
            hostname = urlparse(link).hostname or ""
        except ValueError:
            hostname = ""

        if len(hostname) < self.patterns.min_hostname_length:
            result.add_rejection(
                filter_category="link",
                filter_name="bad_hostname",
                reason="Link has no usable hostname",
                detail=f"Link '{link}'",
            )

    def _check_link_path(self, link: str, result: FilterResult) -> None:
        for pattern in self.patterns.link_regexes:
            if pattern.search(link) and not self.patterns.job_detail_regex.search(link):
                result.add_rejection(
                    filter_category="link",
                    filter_name="listing_link",
                    reason="Link points at a listing page",
                    detail=f"Link matches '{pattern.pattern}'",
                )
                return

    def _check_keywordless_title(self, title: str, result: FilterResult) -> None:
        title_lower = title.lower().strip()
        if any(keyword in title_lower for keyword in self.patterns.job_keywords):
            return

        if (
            len(title.split()) < self.patterns.min_keywordless_words
            or len(title.strip()) < self.patterns.min_keywordless_length
        ):
            result.add_rejection(
                filter_category="title",
                filter_name="keywordless_short",
                reason="Title has no role keyword",
                detail="Title without a role keyword is too short to trust",
            )
            return

        for pattern in self.patterns.marketing_regexes:
            if pattern.search(title_lower):
                result.add_rejection(
                    filter_category="title",
                    filter_name="marketing_copy",
                    reason="Title looks like marketing copy",
                    detail=f"Title matches '{pattern.pattern}'",
                )
                return


_default_classifier = JobValidityClassifier()


def is_valid_job(title: Optional[str], company: Optional[str], link: Optional[str]) -> bool:
    """Module-level shortcut using the default pattern set."""
    return _default_classifier.is_valid_job(title, company, link)
