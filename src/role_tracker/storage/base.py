"""Persistence interface consumed by the reconciler, cleanup and listing."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from role_tracker.models import Role, RoleRecord, RoleSource, ScrapeStatus, SourceRecord
from role_tracker.storage.queries import RoleQuery, filter_roles, paginate


class RoleStore(ABC):
    """
    Abstract role store.

    Implementations must enforce uniqueness on both identity keys:
    (company_name, role_title) for roles and (source, source_role_id) for
    sources. A create that loses a race raises RoleConflictError.
    Errors reaching the backend at all raise StoreUnavailableError.
    """

    def ping(self) -> None:
        """Verify the store is reachable. Default: always reachable."""
        return None

    @abstractmethod
    def find_role_by_identity(self, company_name: str, role_title: str) -> Optional[Role]:
        """Exact, case-sensitive lookup by identity key."""
        pass

    @abstractmethod
    def create_role(self, record: RoleRecord, seen_at: datetime) -> Role:
        """
        Create a role with first_seen_at = last_seen_at = seen_at.

        Raises:
            RoleConflictError: A role with the same identity already exists
        """
        pass

    @abstractmethod
    def touch_role_last_seen(self, role_id: str, timestamp: datetime) -> None:
        """Advance last_seen_at to timestamp. Never moves it backwards."""
        pass

    @abstractmethod
    def find_source_by_identity(self, source: str, source_role_id: str) -> Optional[RoleSource]:
        pass

    @abstractmethod
    def upsert_source(
        self,
        tracker_role_id: str,
        record: SourceRecord,
        seen_at: datetime,
        scrape_status: ScrapeStatus = ScrapeStatus.SUCCESS,
    ) -> RoleSource:
        """
        Create or refresh the source keyed by (source, source_role_id).

        On update only tracker_role_id, last_seen_at, last_scraped_at,
        application_url, scrape_status and raw_payload change. The source is
        re-pointed at tracker_role_id when a board renames the posting.

        Raises:
            PersistenceError: tracker_role_id names no stored role
        """
        pass

    @abstractmethod
    def get_role(self, role_id: str) -> Optional[Role]:
        pass

    @abstractmethod
    def iter_roles(self) -> Iterator[Role]:
        """Every stored role, active or not."""
        pass

    @abstractmethod
    def sources_for_role(self, role_id: str) -> List[RoleSource]:
        pass

    @abstractmethod
    def set_role_active(self, role_id: str, is_active: bool) -> None:
        pass

    @abstractmethod
    def delete_role(self, role_id: str) -> None:
        """Remove a role together with all of its sources."""
        pass

    def iter_active_roles(self) -> Iterator[Role]:
        for role in self.iter_roles():
            if role.is_active:
                yield role

    def list_roles(self, query: Optional[RoleQuery] = None) -> Dict[str, Any]:
        """Paginated listing of active roles (see storage.queries)."""
        query = query or RoleQuery()
        return paginate(filter_roles(self.iter_roles(), query), query)
