"""Main entry point for the role tracker scraper."""

import argparse
import sys
from typing import Any, Dict, Iterable, List, Optional

from role_tracker.config import (
    DEFAULT_CONFIG_PATH,
    build_classifier,
    build_static_fetcher,
    build_store,
    load_config,
)
from role_tracker.exceptions import StoreUnavailableError
from role_tracker.fetchers.rendered import RenderedFetcher
from role_tracker.fetchers.static import DEFAULT_USER_AGENT
from role_tracker.logging_config import get_logger, setup_logging
from role_tracker.models import RunSummary
from role_tracker.reconciler import RoleReconciler
from role_tracker.scrape_runner import ScrapeRunner
from role_tracker.scrapers.base import BaseExtractor
from role_tracker.scrapers.registry import build_extractors, load_sources
from role_tracker.storage.base import RoleStore

logger = get_logger(__name__)


def load_extractors(
    config: Dict[str, Any], names: Optional[Iterable[str]] = None
) -> List[BaseExtractor]:
    """Build the enabled extractors listed in the configured sources file."""
    entries = load_sources(config["sources_file"])
    return build_extractors(entries, classifier=build_classifier(config), names=names)


def run_scrape(
    config: Dict[str, Any],
    names: Optional[Iterable[str]] = None,
    dry_run: bool = False,
    store: Optional[RoleStore] = None,
) -> RunSummary:
    """
    One full scrape pass with the configured store and fetchers.

    Raises:
        StoreUnavailableError: The store could not be reached; the run was aborted
    """
    extractors = load_extractors(config, names)
    store = store or build_store(config, dry_run=dry_run)
    store.ping()

    scraping = config.get("scraping", {})
    static_fetcher = build_static_fetcher(config)
    rendered_fetcher = RenderedFetcher(
        headless=bool(scraping.get("headless", True)),
        user_agent=scraping.get("user_agent") or DEFAULT_USER_AGENT,
    )
    runner = ScrapeRunner(
        RoleReconciler(store),
        static_fetcher,
        rendered_fetcher,
        delay_between_sources=float(scraping.get("delay_between_sources", 0.0)),
    )

    try:
        return runner.run_all(extractors)
    finally:
        static_fetcher.close()
        rendered_fetcher.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function. Returns the process exit code."""
    parser = argparse.ArgumentParser(
        description="Role Tracker - Scrape startup and VC job boards into one catalog"
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--sources",
        nargs="+",
        metavar="NAME",
        help="Only run these sources (board name or source id)",
    )
    parser.add_argument(
        "--list-sources", action="store_true", help="List enabled sources and exit"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Use an in-memory store instead of the configured backend",
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)
    log_config = config.get("logging", {})
    setup_logging(log_level=log_config.get("level", "INFO"), log_file=log_config.get("file"))

    if args.list_sources:
        for extractor in load_extractors(config, args.sources):
            mode = "browser" if extractor.requires_browser else "http"
            print(f"{extractor.source:<28} {mode:<8} {extractor.source_url}")
        return 0

    try:
        summary = run_scrape(config, names=args.sources, dry_run=args.dry_run)
    except StoreUnavailableError as e:
        logger.error(f"Scrape run aborted, role store unavailable: {e}")
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    print("\n" + "=" * 70)
    print("SCRAPE COMPLETE!")
    print("=" * 70)
    print(f"Sources succeeded: {summary.success_count}")
    print(f"Sources failed: {summary.failure_count}")
    print(f"Jobs extracted: {summary.total_jobs}")
    print(f"New roles: {summary.new_roles}")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
