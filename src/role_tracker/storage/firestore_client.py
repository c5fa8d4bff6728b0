"""Shared Firestore client factory."""

import logging
import os
from typing import Dict, Optional

from google.cloud import firestore as gcloud_firestore

from role_tracker.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class FirestoreClient:
    """
    Caches one Firestore client per database name.

    Usage:
        db = FirestoreClient.get_client("(default)", "/path/to/service-account.json")
    """

    _clients: Dict[str, gcloud_firestore.Client] = {}

    @classmethod
    def get_client(
        cls, database_name: str = "(default)", credentials_path: Optional[str] = None
    ) -> gcloud_firestore.Client:
        """
        Get (or create) a client for the named database.

        Args:
            database_name: Firestore database id
            credentials_path: Service account JSON. Falls back to
                GOOGLE_APPLICATION_CREDENTIALS, then application default credentials.

        Raises:
            StoreUnavailableError: If the client cannot be created
        """
        if database_name in cls._clients:
            return cls._clients[database_name]

        credentials_path = credentials_path or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

        try:
            if credentials_path:
                if not os.path.exists(credentials_path):
                    raise FileNotFoundError(f"Credentials file not found: {credentials_path}")
                client = gcloud_firestore.Client.from_service_account_json(
                    credentials_path, database=database_name
                )
            else:
                client = gcloud_firestore.Client(database=database_name)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Firestore configuration error: {e}")
            raise StoreUnavailableError(f"Cannot initialize Firestore: {e}") from e
        except Exception as e:
            logger.error(
                f"Unexpected error initializing Firestore ({type(e).__name__}): {e}",
                exc_info=True,
            )
            raise StoreUnavailableError(f"Cannot initialize Firestore: {e}") from e

        logger.info(f"Connected to Firestore database: {database_name}")
        cls._clients[database_name] = client
        return client

    @classmethod
    def reset(cls) -> None:
        """Forget cached clients."""
        cls._clients.clear()
