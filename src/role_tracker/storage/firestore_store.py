"""Firestore-backed role store.

Document ids are derived from the identity keys (SHA-256), so "find by
identity" is a direct document read and uniqueness is enforced by
Firestore itself: DocumentReference.create() fails with AlreadyExists
when another writer got there first.
"""

import hashlib
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.cloud import firestore as gcloud_firestore

from role_tracker.exceptions import PersistenceError, RoleConflictError, StoreUnavailableError
from role_tracker.logging_config import get_structured_logger
from role_tracker.models import Role, RoleRecord, RoleSource, ScrapeStatus, SourceRecord
from role_tracker.storage.base import RoleStore
from role_tracker.storage.firestore_client import FirestoreClient
from role_tracker.storage.queries import RoleQuery, filter_roles, paginate

logger = logging.getLogger(__name__)
slogger = get_structured_logger(__name__)

ROLES_COLLECTION = "tracker-roles"
SOURCES_COLLECTION = "tracker-role-sources"

# Standard field name mappings: Python snake_case → Firestore camelCase
FIELD_MAPPING = {
    "company_name": "companyName",
    "company_domain": "companyDomain",
    "funding_stage": "fundingStage",
    "company_size": "companySize",
    "role_title": "roleTitle",
    "role_level": "roleLevel",
    "role_type": "roleType",
    "work_mode": "workMode",
    "compensation_text": "compensationText",
    "salary_min": "salaryMin",
    "salary_max": "salaryMax",
    "salary_currency": "salaryCurrency",
    "offers_equity": "offersEquity",
    "company_description": "companyDescription",
    "role_description": "roleDescription",
    "posting_date": "postingDate",
    "closing_date": "closingDate",
    "is_active": "isActive",
    "first_seen_at": "firstSeenAt",
    "last_seen_at": "lastSeenAt",
    "tracker_role_id": "trackerRoleId",
    "source_role_id": "sourceRoleId",
    "source_url": "sourceUrl",
    "application_url": "applicationUrl",
    "last_scraped_at": "lastScrapedAt",
    "scrape_status": "scrapeStatus",
    "raw_payload": "rawPayload",
}

_REVERSE_MAPPING = {v: k for k, v in FIELD_MAPPING.items()}

# Backend errors that mean the store itself is unusable
_UNAVAILABLE_ERRORS = (
    gcloud_exceptions.ServiceUnavailable,
    gcloud_exceptions.DeadlineExceeded,
    gcloud_exceptions.Unauthenticated,
    gcloud_exceptions.PermissionDenied,
)


def to_firestore_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert snake_case keys to Firestore camelCase (None values kept as null)."""
    return {FIELD_MAPPING.get(k, k): v for k, v in data.items()}


def from_firestore_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert Firestore camelCase keys back to snake_case."""
    return {_REVERSE_MAPPING.get(k, k): v for k, v in data.items()}


def _identity_id(*parts: str) -> str:
    return hashlib.sha256("\x1f".join(parts).encode("utf-8")).hexdigest()


def role_doc_id(company_name: str, role_title: str) -> str:
    """Deterministic document id for a role identity."""
    return _identity_id("role", company_name, role_title)


def source_doc_id(source: str, source_role_id: str) -> str:
    """Deterministic document id for a source identity."""
    return _identity_id("source", source, source_role_id)


@gcloud_firestore.transactional
def _advance_last_seen(transaction, role_ref, timestamp: datetime) -> bool:
    snapshot = role_ref.get(transaction=transaction)
    if not snapshot.exists:
        raise PersistenceError(f"Role {role_ref.id} no longer exists")
    current = (snapshot.to_dict() or {}).get("lastSeenAt")
    if current is not None and current >= timestamp:
        return False
    transaction.update(role_ref, {"lastSeenAt": timestamp})
    return True


class FirestoreRoleStore(RoleStore):
    """Role store on Google Cloud Firestore."""

    def __init__(
        self, credentials_path: Optional[str] = None, database_name: str = "(default)"
    ):
        """
        Initialize Firestore role store.

        Args:
            credentials_path: Path to a service account JSON.
            database_name: Firestore database id.
        """
        self.database_name = database_name
        self.db = FirestoreClient.get_client(database_name, credentials_path)

    @contextmanager
    def _store_errors(self, operation: str, detail: Any = ""):
        """Translate backend exceptions into the pipeline's error types."""
        try:
            yield
        except _UNAVAILABLE_ERRORS as e:
            logger.error(f"Firestore unavailable during {operation} {detail}: {e}")
            raise StoreUnavailableError(f"Firestore unavailable during {operation}: {e}") from e
        except gcloud_exceptions.GoogleAPICallError as e:
            logger.error(f"Firestore error during {operation} {detail}: {e}")
            raise PersistenceError(f"Firestore {operation} failed: {e}") from e

    def ping(self) -> None:
        with self._store_errors("ping"):
            list(self.db.collection(ROLES_COLLECTION).limit(1).stream())

    def _roles(self):
        return self.db.collection(ROLES_COLLECTION)

    def _sources(self):
        return self.db.collection(SOURCES_COLLECTION)

    def _role_from_doc(self, doc) -> Role:
        data = from_firestore_fields(doc.to_dict() or {})
        data["id"] = doc.id
        return Role(**data)

    def _source_from_doc(self, doc) -> RoleSource:
        data = from_firestore_fields(doc.to_dict() or {})
        data["id"] = doc.id
        return RoleSource(**data)

    def find_role_by_identity(self, company_name: str, role_title: str) -> Optional[Role]:
        with self._store_errors("find_role", (company_name, role_title)):
            doc = self._roles().document(role_doc_id(company_name, role_title)).get()
        return self._role_from_doc(doc) if doc.exists else None

    def create_role(self, record: RoleRecord, seen_at: datetime) -> Role:
        role_id = role_doc_id(*record.identity)
        data = record.model_dump(mode="python")
        data.update(is_active=True, first_seen_at=seen_at, last_seen_at=seen_at)

        try:
            with self._store_errors("create_role", record.identity):
                self._roles().document(role_id).create(to_firestore_fields(data))
        except PersistenceError as e:
            if isinstance(e.__cause__, gcloud_exceptions.AlreadyExists):
                raise RoleConflictError(
                    f"Role already exists: {record.identity}", identity=record.identity
                ) from e.__cause__
            raise

        logger.debug(f"Created role {role_id}: {record.role_title} @ {record.company_name}")
        return Role(**data, id=role_id)

    def touch_role_last_seen(self, role_id: str, timestamp: datetime) -> None:
        with self._store_errors("touch_role", role_id):
            _advance_last_seen(self.db.transaction(), self._roles().document(role_id), timestamp)

    def find_source_by_identity(self, source: str, source_role_id: str) -> Optional[RoleSource]:
        with self._store_errors("find_source", (source, source_role_id)):
            doc = self._sources().document(source_doc_id(source, source_role_id)).get()
        return self._source_from_doc(doc) if doc.exists else None

    def upsert_source(
        self,
        tracker_role_id: str,
        record: SourceRecord,
        seen_at: datetime,
        scrape_status: ScrapeStatus = ScrapeStatus.SUCCESS,
    ) -> RoleSource:
        doc_id = source_doc_id(*record.identity)
        ref = self._sources().document(doc_id)
        status = ScrapeStatus(scrape_status).value

        refresh = {
            "tracker_role_id": tracker_role_id,
            "last_seen_at": seen_at,
            "last_scraped_at": seen_at,
            "application_url": record.application_url,
            "scrape_status": status,
            "raw_payload": record.raw_payload,
        }

        with self._store_errors("upsert_source", record.identity):
            snapshot = ref.get()
            if snapshot.exists:
                ref.update(to_firestore_fields(refresh))
                existing = from_firestore_fields(snapshot.to_dict() or {})
                existing.update(refresh)
                existing["id"] = doc_id
                return RoleSource(**existing)

            data = dict(
                refresh,
                source=record.source,
                source_role_id=record.source_role_id,
                source_url=record.source_url,
            )
            try:
                ref.create(to_firestore_fields(data))
            except gcloud_exceptions.AlreadyExists:
                # Lost a create race; refresh the winner's document
                ref.update(to_firestore_fields(refresh))
                winner = from_firestore_fields(ref.get().to_dict() or {})
                winner.update(refresh)
                winner["id"] = doc_id
                return RoleSource(**winner)

        return RoleSource(**data, id=doc_id)

    def get_role(self, role_id: str) -> Optional[Role]:
        with self._store_errors("get_role", role_id):
            doc = self._roles().document(role_id).get()
        return self._role_from_doc(doc) if doc.exists else None

    def iter_roles(self) -> Iterator[Role]:
        with self._store_errors("iter_roles"):
            docs = list(self._roles().stream())
        for doc in docs:
            yield self._role_from_doc(doc)

    def iter_active_roles(self) -> Iterator[Role]:
        with self._store_errors("iter_active_roles"):
            docs = list(self._roles().where("isActive", "==", True).stream())
        for doc in docs:
            yield self._role_from_doc(doc)

    def sources_for_role(self, role_id: str) -> List[RoleSource]:
        with self._store_errors("sources_for_role", role_id):
            docs = list(self._sources().where("trackerRoleId", "==", role_id).stream())
        return [self._source_from_doc(doc) for doc in docs]

    def set_role_active(self, role_id: str, is_active: bool) -> None:
        with self._store_errors("set_role_active", role_id):
            self._roles().document(role_id).update({"isActive": is_active})

    def delete_role(self, role_id: str) -> None:
        with self._store_errors("delete_role", role_id):
            batch = self.db.batch()
            for doc in self._sources().where("trackerRoleId", "==", role_id).stream():
                batch.delete(doc.reference)
            batch.delete(self._roles().document(role_id))
            batch.commit()
        slogger.database_activity("delete", ROLES_COLLECTION, "committed", {"role_id": role_id})

    def list_roles(self, query: Optional[RoleQuery] = None) -> Dict[str, Any]:
        """Equality filters run in Firestore; search, ordering and paging run here."""
        query = query or RoleQuery()
        with self._store_errors("list_roles"):
            ref = self._roles().where("isActive", "==", True)
            if query.work_mode:
                ref = ref.where("workMode", "==", query.work_mode)
            if query.role_level:
                ref = ref.where("roleLevel", "==", query.role_level)
            docs = list(ref.stream())
        roles = [self._role_from_doc(doc) for doc in docs]
        return paginate(filter_roles(roles, query), query)
