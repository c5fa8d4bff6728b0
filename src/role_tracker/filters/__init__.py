"""Job validity filtering."""

from role_tracker.filters.models import FilterRejection, FilterResult
from role_tracker.filters.patterns import PATTERNS_VERSION, ValidityPatterns
from role_tracker.filters.validity import JobValidityClassifier, is_valid_job

__all__ = [
    "JobValidityClassifier",
    "ValidityPatterns",
    "PATTERNS_VERSION",
    "FilterResult",
    "FilterRejection",
    "is_valid_job",
]
