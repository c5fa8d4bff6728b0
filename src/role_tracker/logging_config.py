"""Logging configuration with optional Google Cloud Logging integration."""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

SERVICE_NAME = "role-tracker"

# Global configuration cache
_logging_config: Optional[Dict] = None


def _load_logging_config() -> Dict:
    """
    Load display settings from config/logging.yaml.

    Returns:
        Dict with logging configuration, or defaults if the file is missing.
    """
    global _logging_config

    if _logging_config is not None:
        return _logging_config

    config_path = Path(__file__).parent.parent.parent / "config" / "logging.yaml"

    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                _logging_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"⚠️  Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            _logging_config = {}
    else:
        _logging_config = {}

    console = _logging_config.setdefault("console", {}) or {}
    _logging_config["console"] = console
    console.setdefault("max_company_name_length", 80)
    console.setdefault("max_role_title_length", 60)
    console.setdefault("max_url_length", 50)

    return _logging_config


def _display(value: str, max_length: int) -> Tuple[str, str]:
    full = (value or "").strip()
    if max_length <= 0 or len(full) <= max_length:
        return full, full
    if max_length <= 3:
        return full, full[:max_length]
    return full, full[: max_length - 3] + "..."


def format_company_name(company_name: str, max_length: Optional[int] = None) -> Tuple[str, str]:
    """
    Format a company name for logging with both full and display versions.

    Args:
        company_name: The full company name to format.
        max_length: Maximum display length. If None, uses config value;
            0 or negative disables truncation.

    Returns:
        Tuple of (full_name, display_name).

    Example:
        >>> format_company_name("Very Long Company Name", max_length=10)
        ('Very Long Company Name', 'Very Lo...')
    """
    if max_length is None:
        max_length = _load_logging_config()["console"]["max_company_name_length"]
    return _display(company_name, max_length)


def format_role_title(role_title: str, max_length: Optional[int] = None) -> Tuple[str, str]:
    """Same as format_company_name, for role titles."""
    if max_length is None:
        max_length = _load_logging_config()["console"]["max_role_title_length"]
    return _display(role_title, max_length)


def format_url(url: str, max_length: Optional[int] = None) -> str:
    """Display version of a URL."""
    if max_length is None:
        max_length = _load_logging_config()["console"]["max_url_length"]
    return _display(url, max_length)[1]


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_cloud_logging: bool = False,
) -> None:
    """
    Configure logging with optional Google Cloud Logging integration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, uses logs/role_tracker.log.
        enable_cloud_logging: Enable Google Cloud Logging integration.

    Environment Variables:
        ENABLE_CLOUD_LOGGING: Set to 'true' to enable Cloud Logging.
        LOG_LEVEL: Override log level.
        LOG_FILE: Override log file path.
        ENVIRONMENT: Environment name, added to the log prefix and Cloud Logging labels.
        GOOGLE_APPLICATION_CREDENTIALS: Service account JSON (required for Cloud Logging).
    """
    if os.getenv("ENABLE_CLOUD_LOGGING", "").lower() == "true":
        enable_cloud_logging = True

    log_level = os.getenv("LOG_LEVEL", log_level).upper()
    log_file = os.getenv("LOG_FILE", log_file or "logs/role_tracker.log")
    environment = os.getenv("ENVIRONMENT", "development")

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    handlers = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_file),
    ]

    labels = {"environment": environment, "service": SERVICE_NAME}
    if enable_cloud_logging:
        try:
            import google.cloud.logging
            from google.cloud.logging.handlers import CloudLoggingHandler

            client = google.cloud.logging.Client()
            cloud_handler = CloudLoggingHandler(client, name=SERVICE_NAME, labels=labels)
            cloud_handler.setLevel(getattr(logging, log_level))
            handlers.append(cloud_handler)

            print(f"✅ Google Cloud Logging enabled (project: {client.project})")

        except ImportError:
            print(
                "⚠️  google-cloud-logging not installed. Install with: pip install google-cloud-logging",
                file=sys.stderr,
            )
            print("   Falling back to file and console logging only.", file=sys.stderr)
            enable_cloud_logging = False

        except Exception as e:
            print(f"⚠️  Failed to initialize Google Cloud Logging: {e}", file=sys.stderr)
            print("   Falling back to file and console logging only.", file=sys.stderr)
            enable_cloud_logging = False

    log_format = f"[{environment.upper()}] %(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level),
        format=log_format,
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: environment={environment}, level={log_level}, file={log_file}"
    )
    if enable_cloud_logging:
        logger.info(f"Google Cloud Logging enabled with labels: {labels}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically for __name__)."""
    return logging.getLogger(name)


def _with_details(message: str, details: Optional[Dict]) -> str:
    if details:
        message += " | " + ", ".join(f"{k}={v}" for k, v in details.items())
    return message


class StructuredLogger:
    """
    Helper for logging pipeline events with a consistent prefix format.

    Every line starts with a bracketed tag ([PIPELINE:RECONCILE], [DB:DELETE],
    [ROLE], [RUN]) so logs can be grepped per concern.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.environment = os.getenv("ENVIRONMENT", "development")

    def pipeline_stage(
        self, source: str, stage: str, status: str, details: Optional[Dict] = None
    ) -> None:
        """
        Log pipeline stage transitions.

        Args:
            source: Extractor name
            stage: Pipeline stage (FETCH, EXTRACT, RECONCILE)
            status: Stage status (started, completed, failed, skipped)
            details: Optional extra fields
        """
        message = _with_details(f"[PIPELINE:{stage.upper()}] {status.upper()} - {source}", details)

        if status.lower() in ["failed", "error"]:
            self.logger.error(message)
        elif status.lower() == "skipped":
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def role_activity(
        self,
        company_name: str,
        role_title: str,
        action: str,
        details: Optional[Dict] = None,
        truncate: bool = True,
    ) -> None:
        """
        Log role-level activity with display truncation.

        Args:
            company_name: Full company name
            role_title: Full role title
            action: Action performed (CREATED, SEEN, SKIPPED)
            details: Optional extra fields
            truncate: Use display-length names (default: True)
        """
        full_company, display_company = format_company_name(company_name)
        full_title, display_title = format_role_title(role_title)
        company = display_company if truncate else full_company
        title = display_title if truncate else full_title

        self.logger.info(_with_details(f"[ROLE] {action} - {title} @ {company}", details))

    def database_activity(
        self, operation: str, collection: str, status: str, details: Optional[Dict] = None
    ) -> None:
        """
        Log store operations.

        Args:
            operation: create, update, delete, query
            collection: Collection or table name
            status: Operation status
            details: Optional extra fields
        """
        message = _with_details(f"[DB:{operation.upper()}] {collection} - {status}", details)
        self.logger.info(message)

    def run_status(self, status: str, details: Optional[Dict] = None) -> None:
        """Log scrape run lifecycle (started, completed, aborted)."""
        message = _with_details(f"[RUN] {status.upper()}", details)
        if status.lower() == "aborted":
            self.logger.error(message)
        else:
            self.logger.info(message)


def get_structured_logger(name: str) -> StructuredLogger:
    """Get a StructuredLogger wrapping logging.getLogger(name)."""
    return StructuredLogger(logging.getLogger(name))
