"""Offline pass that re-applies the validity classifier to stored roles."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from role_tracker.filters.validity import JobValidityClassifier
from role_tracker.logging_config import get_structured_logger
from role_tracker.models import Role
from role_tracker.storage.base import RoleStore

logger = logging.getLogger(__name__)
slogger = get_structured_logger(__name__)


@dataclass
class CleanupSummary:
    """
    Counts from one cleanup pass.

    invalid_role_ids holds roles that failed; reasons counts them by the
    check that rejected them ("title.blocked_title": 3).
    """

    checked: int = 0
    invalid: int = 0
    deactivated: int = 0
    deleted: int = 0
    patterns_version: Optional[str] = None
    invalid_role_ids: List[str] = field(default_factory=list)
    reasons: Dict[str, int] = field(default_factory=dict)


def application_url_for(store: RoleStore, role: Role) -> str:
    """Application URL from the most recently seen source ("" when there is none)."""
    sources = store.sources_for_role(role.id)
    if not sources:
        return ""
    latest = max(sources, key=lambda source: source.last_seen_at)
    return latest.application_url


def cleanup_invalid_roles(
    store: RoleStore,
    classifier: Optional[JobValidityClassifier] = None,
    delete: bool = False,
    dry_run: bool = False,
) -> CleanupSummary:
    """
    Deactivate (or delete) active roles that no longer pass validation.

    Roles stored before a classifier change keep their rows until this runs.

    Args:
        store: Role store to clean
        classifier: Classifier to apply (default patterns when None)
        delete: Remove failing roles and their sources instead of deactivating
        dry_run: Only report what would change
    """
    classifier = classifier or JobValidityClassifier()
    summary = CleanupSummary(patterns_version=classifier.version)

    for role in list(store.iter_active_roles()):
        summary.checked += 1
        link = application_url_for(store, role)
        result = classifier.evaluate(role.role_title, role.company_name, link)
        if result.passed:
            continue

        summary.invalid += 1
        summary.invalid_role_ids.append(role.id)
        check = result.rejection.check
        summary.reasons[check] = summary.reasons.get(check, 0) + 1
        logger.info(
            f"Invalid role {role.id}: {role.role_title} @ {role.company_name} "
            f"({result.get_rejection_summary()})"
        )
        if dry_run:
            continue

        if delete:
            store.delete_role(role.id)
            summary.deleted += 1
            slogger.database_activity("delete", "roles", "removed", {"role_id": role.id})
        else:
            store.set_role_active(role.id, False)
            summary.deactivated += 1
            slogger.database_activity("update", "roles", "deactivated", {"role_id": role.id})

    logger.info(
        f"Cleanup checked {summary.checked} roles: {summary.invalid} invalid, "
        f"{summary.deactivated} deactivated, {summary.deleted} deleted"
        + (" (dry run)" if dry_run else "")
    )
    return summary
