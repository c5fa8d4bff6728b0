"""Role storage modules."""

from role_tracker.storage.base import RoleStore
from role_tracker.storage.firestore_client import FirestoreClient
from role_tracker.storage.firestore_store import FirestoreRoleStore
from role_tracker.storage.memory_store import InMemoryRoleStore
from role_tracker.storage.queries import RoleQuery, filter_roles, paginate

__all__ = [
    "FirestoreClient",
    "FirestoreRoleStore",
    "InMemoryRoleStore",
    "RoleQuery",
    "RoleStore",
    "filter_roles",
    "paginate",
]
