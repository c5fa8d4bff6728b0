"""
Pattern data for the job validity classifier.

Pattern lists are kept apart from the classifier so they can be tuned (or
loaded from YAML) without touching extractor code. Bump PATTERNS_VERSION
whenever a list changes so cleanup runs can tell which rules were applied.
"""

import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Pattern

PATTERNS_VERSION = "2024.1"

# Navigation chrome, category headers and marketing copy seen in place of titles
INVALID_TITLE_PATTERNS = [
    r"^(all|show|view|see|browse|search|filter|sort|jobs?|careers?|companies?|startups?)$",
    r"^(engineering|product|design|sales|marketing|operations|data|customer support|freelance)\s+jobs?$",
    r"^(freelance|contract|part.?time|full.?time)\s+(developer|designer|engineer|jobs?)$",
    r"^\d+\s+companies?",
    r"^\d+\s+jobs?",
    r"^\d+[,.]?\d*\s+opportunities?",
    r"^(interview|guide|directory|founder|startup)\s+(guide|directory|founder|startup)$",
    r"make a dent",
    r"define the future",
    r"it's time to build",
    r"build the future",
    r"show me jobs",
    r"within the role of",
    r"matching jobs at",
    r"^\s*[•◦]\s*",
    r"create profile",
    r"sign (up|in)",
    r"^account\.",
    r"^jobs?\.",
    r"^\w+\.(ycombinator|ashbyhq|jobs|careers)",
    r"\s*›\s*$",
    r"\s*→\s*$",
    r"^[^a-z]*$",
    r"portfolio job opportunities",
    r"privacy notice",
    r"your career",
    r"^full\s*$",
    r"^[a-z]+\s*$",
    r"\.\s*privacy",
    r"opportunities?\.",
]

# Lone words left behind when a title gets cut off
TRUNCATED_TITLES = ["full", "senior", "junior", "lead", "staff"]

INVALID_COMPANY_PATTERNS = [
    r"^(workinstartups|work in startups|account\.|jobs?\.|careers?\.)",
    r"^(ycombinator|y combinator|yc)$",
    r"^(all|show|view|see|browse|search|filter|sort)$",
    r"^\d+$",
    r"^[^a-z]+$",
]

# Paths that point at listing or marketing pages rather than a posting
INVALID_LINK_PATTERNS = [
    r"/careers?$",
    r"/jobs?$",
    r"/about",
    r"/blog",
    r"/contact",
    r"/login",
    r"/signup",
    r"/directory",
    r"/guide",
    r"#$",
    r"^#",
    r"mailto:",
    r"javascript:",
]

# /jobs/<id> or /careers/<slug> rescues a link caught by INVALID_LINK_PATTERNS
JOB_DETAIL_LINK_PATTERN = r"/jobs?/[^/]+|/careers?/[^/]+"

JOB_KEYWORDS = [
    "engineer",
    "developer",
    "designer",
    "manager",
    "analyst",
    "specialist",
    "scientist",
    "architect",
    "lead",
    "director",
    "coordinator",
    "assistant",
    "executive",
    "officer",
    "consultant",
    "advisor",
    "researcher",
    "intern",
    "fellow",
    "associate",
    "representative",
    "agent",
    "technician",
    "operator",
]

# Applied only to titles without a job keyword
MARKETING_PATTERNS = [
    r"portfolio",
    r"privacy",
    r"opportunities?",
    r"your career",
    r"build the future",
    r"from here",
]


def _compile(patterns: List[str]) -> List[Pattern[str]]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


@dataclass
class ValidityPatterns:
    """
    Versioned bundle of every list the classifier consults.

    Attributes:
        version: Identifier recorded alongside cleanup results
        min_title_length: Minimum title length in characters
        min_title_words: Minimum whitespace-delimited words in a title
        min_single_word_length: A lone word shorter than this is a fragment
        min_keywordless_words: Word floor for titles without a job keyword
        min_keywordless_length: Length floor for titles without a job keyword
        min_company_length: Minimum company name length after trim
        min_hostname_length: Minimum link hostname length
    """

    version: str = PATTERNS_VERSION
    invalid_titles: List[str] = field(default_factory=lambda: list(INVALID_TITLE_PATTERNS))
    truncated_titles: List[str] = field(default_factory=lambda: list(TRUNCATED_TITLES))
    invalid_companies: List[str] = field(default_factory=lambda: list(INVALID_COMPANY_PATTERNS))
    invalid_links: List[str] = field(default_factory=lambda: list(INVALID_LINK_PATTERNS))
    job_detail_link: str = JOB_DETAIL_LINK_PATTERN
    job_keywords: List[str] = field(default_factory=lambda: list(JOB_KEYWORDS))
    marketing: List[str] = field(default_factory=lambda: list(MARKETING_PATTERNS))

    min_title_length: int = 10
    min_title_words: int = 2
    min_single_word_length: int = 8
    min_keywordless_words: int = 3
    min_keywordless_length: int = 15
    min_company_length: int = 2
    min_hostname_length: int = 3

    def __post_init__(self) -> None:
        self.title_regexes = _compile(self.invalid_titles)
        self.company_regexes = _compile(self.invalid_companies)
        self.link_regexes = _compile(self.invalid_links)
        self.job_detail_regex = re.compile(self.job_detail_link, re.IGNORECASE)
        self.marketing_regexes = _compile(self.marketing)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidityPatterns":
        """
        Build patterns from a config mapping, ignoring unknown keys.

        Missing keys keep their defaults, so a YAML override only needs to
        list what it changes.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in (data or {}).items() if key in known})


DEFAULT_PATTERNS = ValidityPatterns()
