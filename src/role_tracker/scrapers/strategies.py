"""
Layered DOM strategies shared by HTML extractors.

A strategy is a callable that takes a parsed document and returns
Candidate objects. run_strategies() tries them in order and stops at the
first one that yields at least one record passing validation.
"""

import logging
import re
from typing import Callable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from role_tracker.models import ExtractedRole
from role_tracker.parsing import normalize_text
from role_tracker.scrapers.base import Candidate

logger = logging.getLogger(__name__)

Strategy = Callable[[BeautifulSoup], List[Candidate]]

# Structural hints for job containers, most specific last
CONTAINER_SELECTORS = [
    '[class*="job"], [class*="Job"]',
    "[data-job-id]",
    'a[href*="/jobs/"], a[href*="/job/"]',
    'tr[class*="job"]',
    'li[class*="job"]',
    "article",
]

TITLE_SELECTOR = 'h2, h3, h4, [class*="title"], [class*="Title"]'
COMPANY_SELECTOR = '[class*="company"], [class*="Company"], [class*="name"]'
LOCATION_SELECTOR = '[class*="location"], [class*="Location"], [class*="remote"]'
COMPENSATION_SELECTOR = '[class*="salary"], [class*="Salary"], [class*="compensation"]'
LINK_SELECTOR = 'a[href*="/job"], a[href*="/jobs"]'

JOB_LINK_SELECTOR = 'a[href*="/job"], a[href*="/jobs"], a[href*="/career"]'

# Recovers "Full Stack Engineer ..." when the title element only held "Full"
_TRUNCATED_TITLE = re.compile(r"(Full[-\s]?Stack|Senior|Junior|Lead|Staff|Principal)\s+[^.]{10,}", re.IGNORECASE)


def element_text(element: Optional[Tag]) -> str:
    """Normalized visible text of an element ("" for None)."""
    if element is None:
        return ""
    return normalize_text(element.get_text(" ", strip=True))


def _select_one(element: Tag, selector: Optional[str]) -> Optional[Tag]:
    if not selector:
        return None
    return element.select_one(selector)


def _container_link(element: Tag, link_selector: str) -> Optional[Tag]:
    if element.name == "a" and element.get("href"):
        return element
    return element.select_one(link_selector) or element.find_parent("a")


def _recover_truncated(title: str, container_text: str) -> str:
    if len(title) < 15 and title.lower().startswith(("full", "senior")):
        match = _TRUNCATED_TITLE.search(container_text)
        if match:
            return match.group(0).strip()
    return title


def structured_strategy(
    container_selectors: Sequence[str] = CONTAINER_SELECTORS,
    title_selector: str = TITLE_SELECTOR,
    company_selector: Optional[str] = COMPANY_SELECTOR,
    location_selector: Optional[str] = LOCATION_SELECTOR,
    compensation_selector: Optional[str] = COMPENSATION_SELECTOR,
    link_selector: str = LINK_SELECTOR,
    min_text_length: int = 20,
    limit: int = 50,
) -> Strategy:
    """
    Build a strategy that reads job cards located by structural hints.

    Container selectors are tried in order; the first one whose matches
    produce any candidate wins.
    """

    def strategy(soup: BeautifulSoup) -> List[Candidate]:
        for selector in container_selectors:
            containers = [
                el for el in soup.select(selector) if len(element_text(el)) > min_text_length
            ][:limit]

            candidates = []
            for container in containers:
                link_el = _container_link(container, link_selector)
                title_el = _select_one(container, title_selector) or link_el
                container_text = element_text(container)

                title = _recover_truncated(element_text(title_el), container_text)
                if not title:
                    continue

                candidates.append(
                    Candidate(
                        title=title,
                        link=link_el.get("href", "") if link_el is not None else "",
                        company=element_text(_select_one(container, company_selector)),
                        location=element_text(_select_one(container, location_selector)),
                        compensation=element_text(_select_one(container, compensation_selector)),
                        description=container_text,
                    )
                )

            if candidates:
                logger.debug(f"Selector '{selector}' produced {len(candidates)} candidates")
                return candidates
        return []

    return strategy


def link_strategy(
    link_selector: str = JOB_LINK_SELECTOR,
    excluded_text: Tuple[str, ...] = ("login", "view all"),
    heading_selector: str = "h2, h3",
    company_selector: Optional[str] = '[class*="company"]',
    location_selector: Optional[str] = '[class*="location"]',
    min_text_length: int = 10,
    limit: int = 50,
) -> Strategy:
    """
    Build a strategy that treats anchors to job detail pages as postings.

    The title comes from the link text (or a nearby heading); company and
    location come from labelled elements in the enclosing block.
    """

    def strategy(soup: BeautifulSoup) -> List[Candidate]:
        candidates = []
        for anchor in soup.select(link_selector):
            parent = anchor.find_parent(["div", "li", "article", "tr"])

            # Icon-only or "Apply" links borrow the card heading
            title = element_text(anchor)
            if len(title) <= min_text_length and parent is not None:
                title = element_text(parent.select_one(heading_selector))
            if len(title) <= min_text_length:
                continue
            if any(excluded in title.lower() for excluded in excluded_text):
                continue

            company = location = ""
            if parent is not None:
                company = element_text(_select_one(parent, company_selector))
                location = element_text(_select_one(parent, location_selector))

            candidates.append(
                Candidate(title=title, link=anchor.get("href", ""), company=company, location=location)
            )
            if len(candidates) >= limit:
                break
        return candidates

    return strategy


def run_strategies(
    soup: BeautifulSoup,
    strategies: Sequence[Strategy],
    build: Callable[[List[Candidate]], List[ExtractedRole]],
) -> List[ExtractedRole]:
    """
    Try strategies left to right, stopping at the first usable result.

    Args:
        soup: Parsed document
        strategies: Ordered strategy callables
        build: Turns candidates into validated records

    Returns:
        Records from the first strategy that produced any, else [].
    """
    for index, strategy in enumerate(strategies, start=1):
        candidates = strategy(soup)
        if not candidates:
            continue
        records = build(candidates)
        if records:
            logger.debug(f"Strategy {index} yielded {len(records)} of {len(candidates)} candidates")
            return records
    return []
