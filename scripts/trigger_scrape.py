#!/usr/bin/env python3
"""
CLI tool to trigger a scrape run in the background.

Mirrors the frontend "scrape" endpoint: the run is started on a background
thread and the trigger response is printed immediately. The script then
waits for the run to finish and prints its summary.
"""
import argparse
import json
import os
import sys
from pathlib import Path

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv

from role_tracker.config import load_config
from role_tracker.logging_config import setup_logging
from role_tracker.main import run_scrape
from role_tracker.trigger import ScrapeTrigger

# Load environment variables
load_dotenv()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Trigger a background scrape run",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scrape every enabled source
  python scripts/trigger_scrape.py

  # Scrape specific sources
  python scripts/trigger_scrape.py --sources ycombinator a16z

  # Try the pipeline without touching Firestore
  python scripts/trigger_scrape.py --dry-run
        """,
    )

    parser.add_argument(
        "--config",
        "-c",
        default=os.getenv("ROLE_TRACKER_CONFIG", "config/config.yaml"),
        help="Configuration file (default: config/config.yaml or $ROLE_TRACKER_CONFIG)",
    )
    parser.add_argument(
        "--sources",
        "-s",
        nargs="+",
        help="Specific sources to scrape (space-separated names or ids)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Use an in-memory store",
    )

    args = parser.parse_args()

    config = load_config(args.config)
    setup_logging(log_level=config["logging"]["level"], log_file=config["logging"]["file"])

    trigger = ScrapeTrigger()
    response = trigger.trigger(
        lambda: run_scrape(config, names=args.sources, dry_run=args.dry_run)
    )
    print(json.dumps(response))

    trigger.wait()
    if trigger.last_error:
        print(f"ERROR: {trigger.last_error}")
        return 1

    print(trigger.last_summary.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
