"""In-process role store used for dry runs and tests."""

import logging
import threading
import uuid
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from role_tracker.exceptions import PersistenceError, RoleConflictError
from role_tracker.models import Role, RoleRecord, RoleSource, ScrapeStatus, SourceRecord
from role_tracker.storage.base import RoleStore

logger = logging.getLogger(__name__)


class InMemoryRoleStore(RoleStore):
    """
    Dict-backed store with unique indexes on both identity keys.

    All mutations take a single lock, so concurrent writers see the same
    uniqueness guarantees a database constraint would give.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._roles: Dict[str, Role] = {}
        self._sources: Dict[str, RoleSource] = {}
        self._role_index: Dict[Tuple[str, str], str] = {}
        self._source_index: Dict[Tuple[str, str], str] = {}

    def find_role_by_identity(self, company_name: str, role_title: str) -> Optional[Role]:
        with self._lock:
            role_id = self._role_index.get((company_name, role_title))
            return self._copy(self._roles.get(role_id)) if role_id else None

    def create_role(self, record: RoleRecord, seen_at: datetime) -> Role:
        with self._lock:
            identity = record.identity
            if identity in self._role_index:
                raise RoleConflictError(f"Role already exists: {identity}", identity=identity)

            role = Role(
                **record.model_dump(),
                id=uuid.uuid4().hex,
                is_active=True,
                first_seen_at=seen_at,
                last_seen_at=seen_at,
            )
            self._roles[role.id] = role
            self._role_index[identity] = role.id
            return self._copy(role)

    def touch_role_last_seen(self, role_id: str, timestamp: datetime) -> None:
        with self._lock:
            role = self._roles.get(role_id)
            if role is None:
                raise PersistenceError(f"Role {role_id} no longer exists")
            if timestamp > role.last_seen_at:
                role.last_seen_at = timestamp

    def find_source_by_identity(self, source: str, source_role_id: str) -> Optional[RoleSource]:
        with self._lock:
            source_id = self._source_index.get((source, source_role_id))
            return self._copy(self._sources.get(source_id)) if source_id else None

    def upsert_source(
        self,
        tracker_role_id: str,
        record: SourceRecord,
        seen_at: datetime,
        scrape_status: ScrapeStatus = ScrapeStatus.SUCCESS,
    ) -> RoleSource:
        with self._lock:
            if tracker_role_id not in self._roles:
                raise PersistenceError(f"Unknown role {tracker_role_id}")

            source_id = self._source_index.get(record.identity)
            if source_id is None:
                source = RoleSource(
                    id=uuid.uuid4().hex,
                    tracker_role_id=tracker_role_id,
                    source=record.source,
                    source_role_id=record.source_role_id,
                    source_url=record.source_url,
                    application_url=record.application_url,
                    last_seen_at=seen_at,
                    last_scraped_at=seen_at,
                    scrape_status=scrape_status,
                    raw_payload=record.raw_payload,
                )
                self._sources[source.id] = source
                self._source_index[record.identity] = source.id
            else:
                source = self._sources[source_id]
                source.tracker_role_id = tracker_role_id
                source.last_seen_at = max(source.last_seen_at, seen_at)
                source.last_scraped_at = seen_at
                source.application_url = record.application_url
                source.scrape_status = ScrapeStatus(scrape_status).value
                source.raw_payload = record.raw_payload
            return self._copy(source)

    def get_role(self, role_id: str) -> Optional[Role]:
        with self._lock:
            return self._copy(self._roles.get(role_id))

    def iter_roles(self) -> Iterator[Role]:
        with self._lock:
            roles = [self._copy(role) for role in self._roles.values()]
        return iter(roles)

    def sources_for_role(self, role_id: str) -> List[RoleSource]:
        with self._lock:
            return [
                self._copy(source)
                for source in self._sources.values()
                if source.tracker_role_id == role_id
            ]

    def set_role_active(self, role_id: str, is_active: bool) -> None:
        with self._lock:
            role = self._roles.get(role_id)
            if role is None:
                raise PersistenceError(f"Role {role_id} no longer exists")
            role.is_active = is_active

    def delete_role(self, role_id: str) -> None:
        with self._lock:
            role = self._roles.pop(role_id, None)
            if role is None:
                return
            self._role_index.pop(role.identity, None)
            for source_id in [s.id for s in self._sources.values() if s.tracker_role_id == role_id]:
                source = self._sources.pop(source_id)
                self._source_index.pop((source.source, source.source_role_id), None)

    @property
    def role_count(self) -> int:
        return len(self._roles)

    @property
    def source_count(self) -> int:
        return len(self._sources)

    @staticmethod
    def _copy(model):
        return model.model_copy(deep=True) if model is not None else None
