"""Optional in-process trigger for the campaign distribution pass.

The external cron hitting ``POST /api/v1/distribution/run`` is the primary
scheduler. This thread exists for single-process deployments without one and
is only started when ``ENABLE_DISTRIBUTION_WORKER`` is set.
"""
from __future__ import annotations

import asyncio
import threading
from typing import Callable, Optional

from sqlalchemy.orm import Session

from promojour import config
from promojour.database import SessionLocal
from promojour.integrations import GraphAPIClient
from promojour.services.distribution import DistributionSummary, run_distribution
from promojour.utils import get_logger

logger = get_logger(__name__)


class DistributionWorker:
    def __init__(
        self,
        *,
        interval_seconds: Optional[float] = None,
        session_factory: Callable[[], Session] = SessionLocal,
        client_factory: Callable[[], GraphAPIClient] = GraphAPIClient,
    ):
        self.interval_seconds = float(
            interval_seconds if interval_seconds is not None else config.DISTRIBUTION_WORKER["interval_seconds"]
        )
        self.session_factory = session_factory
        self.client_factory = client_factory
        self.last_summary: DistributionSummary | None = None
        self.last_error: str | None = None
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():  # pragma: no cover
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="distribution-worker", daemon=True)
        self._thread.start()
        logger.info("Distribution worker started", interval_seconds=self.interval_seconds)

    def stop(self, timeout: float | None = None) -> bool:
        """Signal the loop and wait up to ``timeout`` for an in-flight pass.

        Returns False when the thread is still alive after the wait.
        """
        self._stop_event.set()
        logger.info("Distribution worker stop requested")
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return True
        if timeout is None:
            timeout = float(config.DISTRIBUTION_WORKER.get("shutdown_timeout_seconds", 30))
        thread.join(timeout)
        if thread.is_alive():
            logger.warning("Distribution worker still running after stop timeout", timeout_seconds=timeout)
            return False
        logger.info("Distribution worker stopped")
        return True

    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    async def _run_pass(self, session: Session) -> DistributionSummary:
        client = self.client_factory()
        try:
            return await run_distribution(session, client)
        finally:
            await client.close()

    def run_once(self) -> DistributionSummary | None:
        """Run one pass synchronously. Returns None when the pass failed."""
        session = self.session_factory()
        try:
            summary = asyncio.run(self._run_pass(session))
        except Exception as e:
            self.last_error = str(e)
            logger.error("Scheduled distribution pass failed", error=str(e), exc_info=True)
            return None
        finally:
            session.close()
        self.last_summary = summary
        self.last_error = None
        logger.info(
            "Scheduled distribution pass completed",
            campaigns_processed=summary.campaigns_processed,
            publish_successes=summary.publish_successes,
            publish_errors=summary.publish_errors,
        )
        return summary

    def _loop(self) -> None:
        # First pass after one interval so a restart does not double up with the cron
        while not self._stop_event.wait(self.interval_seconds):
            self.run_once()


__all__ = ["DistributionWorker"]
