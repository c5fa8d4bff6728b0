#!/usr/bin/env python3
"""
Re-validate stored roles and retire the ones that no longer pass.

Roles saved before a change to the validity patterns (navigation links,
marketing headings, truncated titles) stay in the catalog until this runs.
By default failing roles are deactivated; --delete removes them together
with their sources.
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from role_tracker.cleanup import cleanup_invalid_roles  # noqa: E402
from role_tracker.config import build_classifier, build_store, load_config  # noqa: E402
from role_tracker.exceptions import StoreUnavailableError  # noqa: E402
from role_tracker.logging_config import setup_logging  # noqa: E402


def main():
    """Main cleanup function."""
    parser = argparse.ArgumentParser(description="Deactivate or delete invalid stored roles")
    parser.add_argument("--config", default="config/config.yaml", help="Configuration file")
    parser.add_argument(
        "--delete", action="store_true", help="Delete invalid roles instead of deactivating"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Report invalid roles without changing anything"
    )
    args = parser.parse_args()

    config = load_config(args.config)
    setup_logging(log_level=config["logging"]["level"], log_file=config["logging"]["file"])

    print("\n" + "=" * 70)
    print("Invalid Role Cleanup")
    print("=" * 70)

    try:
        store = build_store(config)
        summary = cleanup_invalid_roles(
            store, build_classifier(config), delete=args.delete, dry_run=args.dry_run
        )
    except StoreUnavailableError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Roles checked:  {summary.checked}")
    print(f"Invalid roles:  {summary.invalid}")
    print(f"Deactivated:    {summary.deactivated}")
    print(f"Deleted:        {summary.deleted}")
    print(f"Patterns:       {summary.patterns_version}")
    for check, count in sorted(summary.reasons.items()):
        print(f"  {check}: {count}")
    if args.dry_run:
        print("\nDry run: no changes were written.")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
