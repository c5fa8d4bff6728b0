"""
Result models for the job validity classifier.

A FilterResult records the first check a candidate failed so extractors
can log why noise was dropped and cleanup runs can tally it.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class FilterRejection:
    """
    Why a candidate was rejected.

    Attributes:
        filter_category: Which field failed ("title", "company", "link")
        filter_name: Specific check that rejected (e.g., "blocked_title", "min_length")
        reason: Human-readable short reason
        detail: The offending value or threshold
    """

    filter_category: str
    filter_name: str
    reason: str
    detail: str

    @property
    def check(self) -> str:
        """Dotted check id, e.g. "title.blocked_title"."""
        return f"{self.filter_category}.{self.filter_name}"

    def to_dict(self) -> dict:
        return {
            "filter_category": self.filter_category,
            "filter_name": self.filter_name,
            "reason": self.reason,
            "detail": self.detail,
        }


@dataclass
class FilterResult:
    """
    Verdict on one (title, company, link) triple.

    Attributes:
        passed: True if the triple looks like a real posting
        rejections: Rejection reasons (empty if passed)
        patterns_version: Version of the pattern lists that produced the verdict
    """

    passed: bool
    rejections: List[FilterRejection] = field(default_factory=list)
    patterns_version: Optional[str] = None

    @property
    def rejection(self) -> Optional[FilterRejection]:
        """The check that failed first, or None."""
        return self.rejections[0] if self.rejections else None

    def add_rejection(
        self, filter_category: str, filter_name: str, reason: str, detail: str
    ) -> None:
        self.passed = False
        self.rejections.append(
            FilterRejection(
                filter_category=filter_category,
                filter_name=filter_name,
                reason=reason,
                detail=detail,
            )
        )

    def get_rejection_summary(self) -> str:
        """Comma-separated rejection reasons, or "No rejections"."""
        if not self.rejections:
            return "No rejections"
        return ", ".join(f"{r.reason} ({r.detail})" for r in self.rejections)

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "patterns_version": self.patterns_version,
            "rejections": [r.to_dict() for r in self.rejections],
            "rejection_summary": self.get_rejection_summary(),
        }
