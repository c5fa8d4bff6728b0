"""Merge extracted role/source pairs into the Role + RoleSource tables."""

import json
import logging
from datetime import datetime
from typing import Callable, Dict

from role_tracker.exceptions import PersistenceError, RoleConflictError
from role_tracker.models import (
    RoleRecord,
    ScrapeStatus,
    SourceRecord,
    UpsertOutcome,
    utcnow,
)
from role_tracker.storage.base import RoleStore

logger = logging.getLogger(__name__)


def default_raw_payload(role: RoleRecord, source: SourceRecord) -> Dict:
    """JSON-safe dump of the extracted pair, stored when the extractor kept no payload."""
    return json.loads(
        json.dumps(
            {
                "role": role.model_dump(mode="json"),
                "source": source.model_dump(mode="json", exclude={"raw_payload"}),
            }
        )
    )


class RoleReconciler:
    """
    Identity resolution for extracted roles.

    A role is identified by (company_name, role_title); the same role seen
    on several boards (or under several links) gets one Role and one
    RoleSource per (source, source_role_id). Re-running with identical input
    only advances timestamps.
    """

    def __init__(self, store: RoleStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock
        self.stats = {
            "new_roles": 0,
            "existing_roles": 0,
            "new_sources": 0,
            "updated_sources": 0,
            "retired_roles": 0,
        }

    def upsert(self, role: RoleRecord, source: SourceRecord) -> UpsertOutcome:
        """
        Persist one role/source pair.

        Returns:
            UpsertOutcome with the canonical role id and what was created

        Raises:
            PersistenceError: The store rejected a write (StoreUnavailableError
                when the store cannot be reached)
        """
        now = self.clock()
        company_name, role_title = role.identity

        existing = self.store.find_role_by_identity(company_name, role_title)
        created = False
        if existing is not None:
            role_id = existing.id
            self.store.touch_role_last_seen(role_id, now)
        else:
            try:
                role_id = self.store.create_role(role, now).id
                created = True
            except RoleConflictError:
                winner = self.store.find_role_by_identity(company_name, role_title)
                if winner is None:
                    raise PersistenceError(
                        f"Role vanished after create conflict: {role.identity}"
                    )
                logger.debug(f"Lost create race for {role.identity}, merging into {winner.id}")
                role_id = winner.id
                self.store.touch_role_last_seen(role_id, now)

        if source.raw_payload is None:
            source = source.model_copy(update={"raw_payload": default_raw_payload(role, source)})

        previous = self.store.find_source_by_identity(source.source, source.source_role_id)
        source_created = previous is None
        self.store.upsert_source(role_id, source, now, ScrapeStatus.SUCCESS)

        if previous is not None and previous.tracker_role_id != role_id:
            self._retire_if_orphaned(previous.tracker_role_id, source)

        self.stats["new_roles" if created else "existing_roles"] += 1
        self.stats["new_sources" if source_created else "updated_sources"] += 1

        return UpsertOutcome(role_id=role_id, created=created, source_created=source_created)

    def _retire_if_orphaned(self, old_role_id: str, source: SourceRecord) -> None:
        """Deactivate a role whose last source moved to a renamed posting."""
        logger.info(
            f"Source {source.source}/{source.source_role_id} moved from role {old_role_id}"
        )
        if not self.store.sources_for_role(old_role_id):
            self.store.set_role_active(old_role_id, False)
            self.stats["retired_roles"] += 1
