"""Run every registered extractor and reconcile what they find."""

import logging
import time
from typing import Iterable, Optional

from role_tracker.exceptions import PersistenceError, StoreUnavailableError
from role_tracker.fetchers.base import FetchAdapter
from role_tracker.logging_config import get_structured_logger
from role_tracker.models import ExtractionResult, RunSummary, utcnow
from role_tracker.reconciler import RoleReconciler
from role_tracker.scrapers.base import BaseExtractor

logger = logging.getLogger(__name__)
slogger = get_structured_logger(__name__)


class ScrapeRunner:
    """
    Sequential scrape pass over a list of extractors.

    One extractor failing never affects the others: run_extractor() turns
    any exception into a failed ExtractionResult. Records from successful
    extractors go to the reconciler one at a time, in extraction order.
    A store that cannot be reached aborts the whole run.
    """

    def __init__(
        self,
        reconciler: RoleReconciler,
        static_fetcher: FetchAdapter,
        rendered_fetcher: Optional[FetchAdapter] = None,
        delay_between_sources: float = 0.0,
    ):
        self.reconciler = reconciler
        self.static_fetcher = static_fetcher
        self.rendered_fetcher = rendered_fetcher
        self.delay_between_sources = delay_between_sources

    def fetcher_for(self, extractor: BaseExtractor) -> FetchAdapter:
        if extractor.requires_browser:
            if self.rendered_fetcher is None:
                raise RuntimeError(f"{extractor.name} needs a browser but none is configured")
            return self.rendered_fetcher
        return self.static_fetcher

    def run_extractor(self, extractor: BaseExtractor) -> ExtractionResult:
        """
        Fetch and extract one board. Never raises.

        Returns:
            ExtractionResult with success=False and the error text on failure
        """
        start = time.monotonic()
        slogger.pipeline_stage(extractor.name, "extract", "started", {"url": extractor.source_url})

        try:
            roles = extractor.scrape(self.fetcher_for(extractor))
        except Exception as e:
            duration = time.monotonic() - start
            error = f"{type(e).__name__}: {e}"
            slogger.pipeline_stage(
                extractor.name, "extract", "failed", {"error": error, "seconds": f"{duration:.1f}"}
            )
            logger.debug(f"Extractor {extractor.name} failed", exc_info=True)
            return ExtractionResult(
                success=False, source=extractor.name, error=error, duration_seconds=duration
            )

        duration = time.monotonic() - start
        slogger.pipeline_stage(
            extractor.name,
            "extract",
            "completed",
            {"jobs": len(roles), "seconds": f"{duration:.1f}"},
        )
        return ExtractionResult(
            success=True, source=extractor.name, roles=roles, duration_seconds=duration
        )

    def reconcile(self, result: ExtractionResult, summary: RunSummary) -> None:
        """
        Stream a successful batch into the store.

        Raises:
            StoreUnavailableError: The store cannot be reached
        """
        for extracted in result.roles:
            role, source = extracted.role, extracted.source
            try:
                outcome = self.reconciler.upsert(role, source)
            except StoreUnavailableError:
                raise
            except PersistenceError as e:
                summary.skipped_records += 1
                logger.error(
                    f"Failed to persist {role.role_title} @ {role.company_name} "
                    f"({source.source}/{source.source_role_id}): {e}"
                )
                continue

            if outcome.created:
                summary.new_roles += 1
                slogger.role_activity(role.company_name, role.role_title, "CREATED")
            else:
                summary.existing_roles += 1
            if outcome.source_created:
                summary.new_sources += 1
            else:
                summary.updated_sources += 1

    def run_all(self, extractors: Iterable[BaseExtractor]) -> RunSummary:
        """
        Run extractors in order and reconcile their output.

        Returns:
            RunSummary of the pass

        Raises:
            StoreUnavailableError: The run was aborted
        """
        extractors = list(extractors)
        summary = RunSummary()
        slogger.run_status("started", {"sources": len(extractors)})

        for i, extractor in enumerate(extractors):
            if i and self.delay_between_sources:
                time.sleep(self.delay_between_sources)

            result = self.run_extractor(extractor)
            if not result.success:
                summary.failure_count += 1
                summary.errors.append(f"{result.source}: {result.error}")
                continue

            summary.success_count += 1
            summary.total_jobs += len(result.roles)
            try:
                self.reconcile(result, summary)
            except StoreUnavailableError as e:
                summary.finished_at = utcnow()
                slogger.run_status("aborted", {"source": extractor.name, "error": str(e)})
                raise

            slogger.pipeline_stage(
                extractor.name, "reconcile", "completed", {"jobs": len(result.roles)}
            )

        summary.finished_at = utcnow()
        self.log_summary(summary)
        return summary

    def log_summary(self, summary: RunSummary) -> None:
        slogger.run_status(
            "completed",
            {
                "jobs": summary.total_jobs,
                "succeeded": summary.success_count,
                "failed": summary.failure_count,
            },
        )
        logger.info(f"  New roles: {summary.new_roles}")
        logger.info(f"  Existing roles seen again: {summary.existing_roles}")
        logger.info(f"  New sources: {summary.new_sources}")
        logger.info(f"  Updated sources: {summary.updated_sources}")
        if summary.skipped_records:
            logger.warning(f"  Records skipped on write errors: {summary.skipped_records}")

        if summary.errors:
            logger.warning(f"⚠️  Errors encountered: {len(summary.errors)}")
            for error in summary.errors:
                logger.warning(f"  - {error}")
