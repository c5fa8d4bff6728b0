"""Exception types raised by the scraping and reconciliation pipeline."""

from typing import Optional


class RoleTrackerError(Exception):
    """Base error for everything raised by role_tracker."""


class FetchError(RoleTrackerError):
    """A document could not be loaded (non-2xx response, navigation failure)."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractionError(RoleTrackerError):
    """An extractor could not make sense of the document it was given."""


class PersistenceError(RoleTrackerError):
    """A single write or read against the role store failed."""


class StoreUnavailableError(PersistenceError):
    """The role store cannot be reached at all. Aborts a scrape run."""


class RoleConflictError(PersistenceError):
    """
    A uniqueness constraint rejected a create.

    Raised when two writers race to create the same Role (or RoleSource).
    The loser is expected to re-fetch the winning row and continue.
    """

    def __init__(self, message: str, identity: tuple = ()):
        super().__init__(message)
        self.identity = identity
