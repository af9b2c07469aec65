# app/services/scan_driver.py
from __future__ import annotations
import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.core.logging import get_logger
from app.schemas.scan import ScanJob, ScanResults, ScanStatus
from app.services.jobs import JobStore
from app.services.scan_engine import ScanEngine

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _advance(progress: int):

    def mutate(job: ScanJob) -> None:
        if job.is_terminal:
            return
        job.progress = max(job.progress, progress)

    return mutate


def _complete(results: ScanResults):

    def mutate(job: ScanJob) -> None:
        if job.is_terminal:
            return
        job.progress = 100
        job.status = ScanStatus.completed
        job.completed_at = _now()
        job.results = results

    return mutate


def _fail(error: str):

    def mutate(job: ScanJob) -> None:
        if job.is_terminal:
            return
        job.status = ScanStatus.failed
        job.completed_at = _now()
        job.error = error

    return mutate


class ProgressDriver:
    """
    Advances one scan from 0 to 100 on a fixed cadence.

    The driver only holds the scan id and its inputs; every tick is a single
    ``JobStore.update``. When an update reports the id as gone (the scan was
    deleted) the driver stops quietly. The final tick attaches results,
    status and completion time in one update, or marks the scan failed if
    the engine raises or the optional deadline passes.
    """

    def __init__(
        self,
        store: JobStore,
        scan_id: str,
        target: str,
        options: Optional[Dict[str, Any]],
        engine: ScanEngine,
        *,
        step: int = 10,
        interval: float = 0.5,
        timeout: Optional[float] = None,
    ):
        if step <= 0:
            raise ValueError("step must be positive")
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.store = store
        self.scan_id = scan_id
        self.target = target
        self.options = options
        self.engine = engine
        self.step = step
        self.interval = interval
        self.timeout = timeout

    async def run(self) -> Optional[ScanStatus]:
        """Returns the terminal status reached, or None if the scan was deleted."""
        started = time.monotonic()
        progress = 0
        while True:
            await asyncio.sleep(self.interval)
            elapsed = time.monotonic() - started

            if self.timeout is not None and elapsed >= self.timeout:
                logger.warning("[SCAN %s] timed out after %.2fs at %d%%",
                               self.scan_id, elapsed, progress)
                return self._apply_terminal(_fail("scan timed out"))

            progress = min(progress + self.step, 100)
            if progress < 100:
                if not self.store.update(self.scan_id, _advance(progress)):
                    return self._gone()
                logger.debug("[SCAN %s] progress %d%%", self.scan_id, progress)
                continue

            return self._finish(elapsed)

    def _finish(self, elapsed: float) -> Optional[ScanStatus]:
        try:
            results = self.engine.collect(self.target, self.options, elapsed)
        except Exception as e:
            logger.exception("[SCAN %s] engine failed", self.scan_id)
            return self._apply_terminal(_fail(str(e) or type(e).__name__))
        return self._apply_terminal(_complete(results))

    def _apply_terminal(self, mutator) -> Optional[ScanStatus]:
        if not self.store.update(self.scan_id, mutator):
            return self._gone()
        job = self.store.get(self.scan_id)
        if job is None:
            return self._gone()
        if job.status is ScanStatus.completed:
            logger.info("[SCAN %s] completed (target=%s)", self.scan_id, self.target)
        else:
            logger.warning("[SCAN %s] %s: %s", self.scan_id, job.status.value, job.error)
        return job.status

    def _gone(self) -> None:
        logger.info("[SCAN %s] deleted while running; driver stopping", self.scan_id)
        return None
