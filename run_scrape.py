#!/usr/bin/env python3
"""Run one full scrape pass with the configured store."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from role_tracker.config import load_config
from role_tracker.logging_config import setup_logging
from role_tracker.main import run_scrape

# Load config
config = load_config("config/config.yaml")

# Set up logging
setup_logging(log_level=config["logging"]["level"], log_file=config["logging"]["file"])

# Run scrape
summary = run_scrape(config)

# Print summary
print("\n" + "=" * 70)
print("SCRAPE COMPLETE!")
print("=" * 70)
print(f"Jobs extracted: {summary.total_jobs}")
print(f"New roles: {summary.new_roles}")
print(f"New sources: {summary.new_sources}")
print(f"Failed sources: {summary.failure_count}")
print("=" * 70)
