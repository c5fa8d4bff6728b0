"""Company-name extraction from card text and listing URLs."""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from role_tracker.parsing.text import normalize_text

# Words that mark the title half of "Company - Title" style text
TITLE_WORDS = ["engineer", "developer", "manager", "designer", "analyst"]

# Aggregators whose hostname says nothing about the hiring company
GENERIC_DOMAINS = [
    "ycombinator.com",
    "workinstartups.com",
    "workatastartup.com",
    "wellfound.com",
    "startup.jobs",
    "ashbyhq.com",
    "jobs.",
    "careers.",
    "account.",
    "talent.",
    "portfoliojobs.",
]

_SPLIT_PATTERNS = [
    re.compile(r"^(.+?)\s+-\s+(.+)$"),
    re.compile(r"^(.+?):\s+(.+)$"),
    re.compile(r"^(.+?)\s+at\s+(.+)$", re.IGNORECASE),
]

_HOSTED_SUBDOMAIN = re.compile(r"^([^.]+)\.(?:ashbyhq|jobs|careers|talent)\.")
_COMPANY_PATH = re.compile(r"/(?:companies|company)/([^/?#]+)", re.IGNORECASE)
_TLD_SUFFIX = re.compile(r"\.(?:co\.uk|com|io|co|ai|dev|net|org)$")
_HOST_PREFIX = re.compile(r"^(?:www|jobs|careers|talent|portfolio)\.")

# Subdomain tokens that are never a company
_RESERVED_SUBDOMAINS = {"www", "jobs", "careers", "talent", "account", "app", "api"}

# "Coast (S21)•Demo platform for B2B sales (10 days ago)"
_YC_LABEL = re.compile(r"^(.+?)\s*\(([WSFX]\d{2})\)")
_YC_DESCRIPTION = re.compile(r"\(([WSFX]\d{2})\)\s*•\s*(.+?)\s*\(")
_YC_POSTED = re.compile(r"\(((?:less than\s+)?(?:about\s+)?\d+\s+(?:hour|day|week|month)s?\s+ago)\)", re.IGNORECASE)


def _has_title_word(text: str) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in TITLE_WORDS)


def _capitalize(token: str) -> str:
    return token[:1].upper() + token[1:]


def _from_text(text: str) -> Optional[str]:
    for pattern in _SPLIT_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue

        first = match.group(1).strip()
        second = match.group(2).strip()
        first_is_title = _has_title_word(first)
        second_is_title = _has_title_word(second)

        if first_is_title and not second_is_title:
            return second
        if second_is_title and not first_is_title:
            return first
        if 2 < len(first) < len(second):
            return first
    return None


def _from_link(link: str) -> Optional[str]:
    try:
        parsed = urlparse(link)
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()
    if not host:
        return None
    if host.startswith("www."):
        host = host[4:]

    # perplexity.ashbyhq.com, acme.jobs.example.com
    subdomain = _HOSTED_SUBDOMAIN.match(host)
    if subdomain and subdomain.group(1) not in _RESERVED_SUBDOMAINS:
        token = subdomain.group(1)
        if 2 < len(token) < 30:
            return _capitalize(token)

    # /companies/open-ai -> "Open Ai"
    path_match = _COMPANY_PATH.search(parsed.path or "")
    if path_match:
        company = " ".join(_capitalize(part) for part in path_match.group(1).split("-") if part)
        if 2 < len(company) < 50:
            return company

    if any(generic in host for generic in GENERIC_DOMAINS):
        return None

    bare = _HOST_PREFIX.sub("", _TLD_SUFFIX.sub("", host))
    if 2 < len(bare) < 30 and "." not in bare:
        return _capitalize(bare)
    return None


def extract_company_name(text: Optional[str], link: Optional[str] = "") -> str:
    """
    Best-effort company name from free text and/or a URL.

    Strategies, in order:
    1. Split "Company - Title", "Company: Title" or "Title at Company" and
       keep the side without title words (shorter side when ambiguous).
    2. From the link: a hosted-board subdomain (perplexity.ashbyhq.com),
       a /companies/<slug> path, then a bare non-aggregator domain.
    3. The trimmed input text.

    Example:
        >>> extract_company_name("Senior Engineer - Acme", "https://acme.com/jobs/1")
        'Acme'
    """
    text = normalize_text(text)

    if text:
        company = _from_text(text)
        if company:
            return company

    if link:
        company = _from_link(link)
        if company:
            return company

    return text


@dataclass
class YCCompanyLabel:
    """Pieces of a YC job-board company label."""

    name: str
    batch: Optional[str] = None
    description: Optional[str] = None
    posted_text: Optional[str] = None


def parse_yc_company_label(text: Optional[str]) -> Optional[YCCompanyLabel]:
    """
    Split a YC label like "Coast (S21)•Demo platform(10 days ago)".

    Returns None when the text carries no "(batch)" marker.
    """
    text = normalize_text(text)
    match = _YC_LABEL.match(text)
    if not match:
        return None

    label = YCCompanyLabel(name=match.group(1).strip(), batch=match.group(2))

    description = _YC_DESCRIPTION.search(text)
    if description:
        label.description = description.group(2).strip()

    posted = _YC_POSTED.search(text)
    if posted:
        label.posted_text = posted.group(1)

    return label
