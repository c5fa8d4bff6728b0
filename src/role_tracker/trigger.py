"""
Fire-and-forget scrape trigger.

The web frontend posts to a "scrape" endpoint and expects an immediate
answer; the run itself happens on a background thread. Only one run is
in flight at a time.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from role_tracker.models import RunSummary

logger = logging.getLogger(__name__)

STARTED = {"message": "Scraper run initiated", "status": "started"}
ALREADY_RUNNING = {"message": "Scraper run already in progress", "status": "already_running"}


class ScrapeTrigger:
    """Starts scrape runs on a daemon thread and remembers the last outcome."""

    def __init__(self):
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self.last_summary: Optional[RunSummary] = None
        self.last_error: Optional[str] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def trigger(self, run: Callable[[], RunSummary]) -> Dict[str, Any]:
        """
        Start run() in the background unless a run is already in flight.

        Returns:
            The response body for the caller
        """
        with self._lock:
            if self.running:
                logger.info("Scrape trigger ignored: run already in progress")
                return dict(ALREADY_RUNNING)

            self._thread = threading.Thread(
                target=self._run, args=(run,), name="scrape-run", daemon=True
            )
            self._thread.start()

        logger.info("Scrape run started in background")
        return dict(STARTED)

    def _run(self, run: Callable[[], RunSummary]) -> None:
        try:
            self.last_summary = run()
            self.last_error = None
        except Exception as e:
            self.last_error = str(e)
            logger.error(f"Background scrape run failed: {e}", exc_info=True)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current run finishes. Returns False on timeout."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()


_default_trigger = ScrapeTrigger()


def trigger_scrape(
    run: Callable[[], RunSummary], trigger: Optional[ScrapeTrigger] = None
) -> Dict[str, Any]:
    """Trigger a background scrape on the process-wide trigger."""
    return (trigger or _default_trigger).trigger(run)
