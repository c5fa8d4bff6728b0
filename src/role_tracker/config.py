"""Configuration loading and the object wiring built from it."""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from role_tracker.fetchers.static import DEFAULT_USER_AGENT, StaticFetcher
from role_tracker.filters.patterns import ValidityPatterns
from role_tracker.filters.validity import JobValidityClassifier
from role_tracker.storage.base import RoleStore
from role_tracker.storage.firestore_store import FirestoreRoleStore
from role_tracker.storage.memory_store import InMemoryRoleStore

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "storage": {
        "backend": "firestore",
        "database_name": "(default)",
        "credentials_path": None,
    },
    "scraping": {
        "headless": True,
        "user_agent": None,
        "max_retries": 2,
        "retry_wait_seconds": 2.0,
        "delay_between_sources": 1.0,
    },
    "sources_file": "config/sources.yaml",
    "validity": {},
    "logging": {"level": "INFO", "file": None},
}

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "STORAGE_BACKEND": ("storage", "backend"),
    "STORAGE_DATABASE_NAME": ("storage", "database_name"),
    "GOOGLE_APPLICATION_CREDENTIALS": ("storage", "credentials_path"),
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Union[str, Path]] = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration from YAML, merged over defaults.

    A missing file yields the defaults. Values from .env and the process
    environment (see ENV_OVERRIDES) win over the file.
    """
    load_dotenv()

    file_config: Dict[str, Any] = {}
    if config_path and Path(config_path).exists():
        with open(config_path, "r") as f:
            file_config = yaml.safe_load(f) or {}
    elif config_path:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    config = _merge(DEFAULT_CONFIG, file_config)

    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            config[section][key] = value

    return config


def build_store(config: Dict[str, Any], dry_run: bool = False) -> RoleStore:
    """
    Create the configured role store.

    Raises:
        ValueError: Unknown storage backend
        StoreUnavailableError: Firestore cannot be initialized
    """
    storage = config.get("storage", {})
    backend = "memory" if dry_run else str(storage.get("backend", "firestore")).lower()

    if backend == "memory":
        logger.info("Using in-memory role store")
        return InMemoryRoleStore()
    if backend == "firestore":
        return FirestoreRoleStore(
            credentials_path=storage.get("credentials_path"),
            database_name=storage.get("database_name", "(default)"),
        )
    raise ValueError(f"Unknown storage backend: {backend}. Use 'memory' or 'firestore'")


def build_classifier(config: Dict[str, Any]) -> JobValidityClassifier:
    """Validity classifier with any pattern overrides from config."""
    overrides = config.get("validity") or {}
    if not overrides:
        return JobValidityClassifier()
    return JobValidityClassifier(ValidityPatterns.from_dict(overrides))


def build_static_fetcher(config: Dict[str, Any]) -> StaticFetcher:
    scraping = config.get("scraping", {})
    return StaticFetcher(
        user_agent=scraping.get("user_agent") or DEFAULT_USER_AGENT,
        max_retries=int(scraping.get("max_retries", 2)),
        retry_wait_seconds=float(scraping.get("retry_wait_seconds", 2.0)),
    )
