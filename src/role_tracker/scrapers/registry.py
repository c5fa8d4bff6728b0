"""Builds extractor instances from the declarative sources list."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type, Union

import yaml

from role_tracker.fetchers.base import FetchOptions
from role_tracker.filters.validity import JobValidityClassifier
from role_tracker.scrapers.a16z import A16zExtractor
from role_tracker.scrapers.a16z_api import A16zApiExtractor
from role_tracker.scrapers.ashby import AshbyExtractor
from role_tracker.scrapers.base import BaseExtractor
from role_tracker.scrapers.generic_vc import GenericVCExtractor
from role_tracker.scrapers.wellfound import WellfoundExtractor
from role_tracker.scrapers.workatastartup import WorkAtAStartupExtractor
from role_tracker.scrapers.ycombinator import YCombinatorExtractor

logger = logging.getLogger(__name__)

EXTRACTOR_TYPES: Dict[str, Type[BaseExtractor]] = {
    "ycombinator": YCombinatorExtractor,
    "a16z": A16zExtractor,
    "a16z_api": A16zApiExtractor,
    "workatastartup": WorkAtAStartupExtractor,
    "wellfound": WellfoundExtractor,
    "ashby": AshbyExtractor,
    "generic_vc": GenericVCExtractor,
}

# Keys consumed here; anything else is passed to the extractor constructor
_RESERVED_KEYS = {"type", "name", "url", "enabled", "fetch"}


def load_sources(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read the sources list from YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file has no "sources" list
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sources file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    sources = data.get("sources")
    if not isinstance(sources, list):
        raise ValueError(f"{path} must contain a 'sources' list")
    return sources


def build_extractor(
    entry: Dict[str, Any], classifier: Optional[JobValidityClassifier] = None
) -> BaseExtractor:
    """
    Instantiate one extractor from a sources entry.

    Raises:
        ValueError: Unknown type or missing name/url
    """
    extractor_type = entry.get("type", "generic_vc")
    extractor_cls = EXTRACTOR_TYPES.get(extractor_type)
    if extractor_cls is None:
        raise ValueError(f"Unknown extractor type '{extractor_type}' for source {entry.get('name')}")

    kwargs = {key: value for key, value in entry.items() if key not in _RESERVED_KEYS}
    if entry.get("name"):
        kwargs["name"] = entry["name"]
    if entry.get("url"):
        kwargs["source_url"] = entry["url"]
    if entry.get("fetch"):
        kwargs["fetch_options"] = FetchOptions(**entry["fetch"])
    if classifier is not None:
        kwargs["classifier"] = classifier

    if extractor_cls in (GenericVCExtractor, AshbyExtractor) and not (
        kwargs.get("name") and kwargs.get("source_url")
    ):
        raise ValueError(f"Source entry {entry} needs both 'name' and 'url'")

    return extractor_cls(**kwargs)


def build_extractors(
    entries: Iterable[Dict[str, Any]],
    classifier: Optional[JobValidityClassifier] = None,
    names: Optional[Iterable[str]] = None,
) -> List[BaseExtractor]:
    """
    Build every enabled extractor in registration order.

    Args:
        entries: Source entries (see config/sources.yaml)
        classifier: Shared validity classifier
        names: Optional case-insensitive filter on name or source id

    Returns:
        Extractors in the order they are listed.
    """
    wanted = {n.lower() for n in names} if names else None
    extractors = []

    for entry in entries:
        if not entry.get("enabled", True):
            logger.debug(f"Skipping disabled source: {entry.get('name')}")
            continue

        extractor = build_extractor(entry, classifier)
        if wanted and extractor.name.lower() not in wanted and extractor.source.lower() not in wanted:
            continue
        extractors.append(extractor)

    logger.info(f"Registered {len(extractors)} extractors")
    return extractors
