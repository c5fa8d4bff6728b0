"""Keyword heuristics for role level, work mode, company stage and size."""

import re
from typing import Optional

from role_tracker.models import RoleLevel, WorkMode

SENIOR_KEYWORDS = ["senior", "sr", "lead", "principal", "staff", "architect"]
ENTRY_KEYWORDS = ["junior", "jr", "entry", "intern", "internship", "graduate"]

_SENIOR_PATTERN = re.compile(r"\b(" + "|".join(SENIOR_KEYWORDS) + r")\b", re.IGNORECASE)
_ENTRY_PATTERN = re.compile(r"\b(" + "|".join(ENTRY_KEYWORDS) + r")\b", re.IGNORECASE)

# "Seed", "Pre-Seed", "Series B"
_STAGE_PATTERN = re.compile(r"\b(Pre-Seed|Seed|Series [A-Z])\b", re.IGNORECASE)

# "100–1000 employees", "<50 employees", "5000+ employees"
_SIZE_PATTERN = re.compile(
    r"(\d[\d,]*\s*[–-]\s*\d[\d,]*|[<>]\s*\d[\d,]*|\d[\d,]*\+?)\s+employees",
    re.IGNORECASE,
)


def extract_role_level(title: Optional[str], description: Optional[str] = "") -> RoleLevel:
    """
    Bucket a role into Entry, Mid or Senior.

    Senior keywords are checked first so "Senior Intern Program Lead" is
    Senior, then entry keywords; everything else is Mid.

    Example:
        >>> extract_role_level("Graduate Software Engineer")
        <RoleLevel.ENTRY: 'Entry'>
    """
    combined = f"{title or ''} {description or ''}"
    if _SENIOR_PATTERN.search(combined):
        return RoleLevel.SENIOR
    if _ENTRY_PATTERN.search(combined):
        return RoleLevel.ENTRY
    return RoleLevel.MID


def infer_work_mode(location: Optional[str], default: WorkMode = WorkMode.REMOTE) -> WorkMode:
    """
    Infer work mode from location text.

    Args:
        location: Location text as shown on the board.
        default: Mode used when location is empty.

    Returns:
        Remote if "remote" appears, Hybrid if "hybrid" appears, else Onsite.
    """
    if not location or not location.strip():
        return default

    lowered = location.lower()
    if "remote" in lowered:
        return WorkMode.REMOTE
    if "hybrid" in lowered:
        return WorkMode.HYBRID
    return WorkMode.ONSITE


def parse_funding_stage(text: Optional[str]) -> Optional[str]:
    """Pull a funding stage ("Seed", "Series B") out of card text."""
    if not text:
        return None
    match = _STAGE_PATTERN.search(text)
    if not match:
        return None
    return re.sub(r"\s+", " ", match.group(1)).strip()


def parse_company_size(text: Optional[str]) -> Optional[str]:
    """
    Pull a head-count band out of card text.

    Example:
        >>> parse_company_size("Design Tools 1000–5000 employees")
        '1000-5000 employees'
    """
    if not text:
        return None
    match = _SIZE_PATTERN.search(text)
    if not match:
        return None
    band = re.sub(r"\s+", "", match.group(1)).replace("–", "-")
    return f"{band} employees"
