"""Job board extractors."""

from role_tracker.scrapers.a16z import A16zExtractor
from role_tracker.scrapers.a16z_api import A16zApiExtractor
from role_tracker.scrapers.ashby import AshbyExtractor
from role_tracker.scrapers.base import BaseExtractor, Candidate
from role_tracker.scrapers.generic_vc import GenericVCExtractor
from role_tracker.scrapers.registry import build_extractors, load_sources
from role_tracker.scrapers.wellfound import WellfoundExtractor
from role_tracker.scrapers.workatastartup import WorkAtAStartupExtractor
from role_tracker.scrapers.ycombinator import YCombinatorExtractor

__all__ = [
    "BaseExtractor",
    "Candidate",
    "YCombinatorExtractor",
    "A16zExtractor",
    "A16zApiExtractor",
    "WorkAtAStartupExtractor",
    "WellfoundExtractor",
    "AshbyExtractor",
    "GenericVCExtractor",
    "build_extractors",
    "load_sources",
]
