# app/services/scan_service.py
from __future__ import annotations
import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from app.core.config import Settings
from app.core.errors import InvalidInput, NotFound, NotReady
from app.core.logging import get_logger
from app.schemas.scan import ScanJob, ScanReport, ScanStatus
from app.services.jobs import JobStore
from app.services.scan_driver import ProgressDriver
from app.services.scan_engine import ScanEngine, SimulatedScanEngine

logger = get_logger(__name__)


def new_scan_id() -> str:
    return f"scan_{uuid.uuid4().hex}"


_NO_OPTIONS: Dict[str, Any] = {}


class ScanService:
    """Entry point for the HTTP layer: create, read, list, delete, report."""

    def __init__(self, store: JobStore, settings: Settings,
                 engine: Optional[ScanEngine] = None, id_factory=new_scan_id):
        self.store = store
        self.settings = settings
        self.engine = engine or SimulatedScanEngine()
        self._id_factory = id_factory
        self._drivers: Set[asyncio.Task] = set()

    @property
    def active_drivers(self) -> int:
        return len(self._drivers)

    async def create_scan(self, target: Optional[str],
                          options: Optional[Dict[str, Any]] = _NO_OPTIONS) -> ScanJob:
        """Store a new running scan and start its progress driver.

        ``target`` and ``options`` are stored exactly as given; omitting
        ``options`` stores ``{}``, an explicit None stays None.
        Must be awaited on the event loop the driver should run on.
        """
        if not target:
            raise InvalidInput("Target is required")
        if options is _NO_OPTIONS:
            options = {}

        job = self._insert_new(target, options)
        driver = ProgressDriver(
            self.store,
            job.id,
            job.target,
            job.options,
            self.engine,
            step=self.settings.SCAN_PROGRESS_STEP,
            interval=self.settings.SCAN_TICK_SECONDS,
            timeout=self.settings.SCAN_TIMEOUT_SECONDS,
        )
        task = asyncio.create_task(driver.run(), name=f"scan-driver-{job.id}")
        self._drivers.add(task)
        task.add_done_callback(self._driver_done)
        logger.info("[SCAN %s] created (target=%s)", job.id, job.target)
        return job

    def _insert_new(self, target: str,
                    options: Optional[Dict[str, Any]]) -> ScanJob:
        for _ in range(max(1, self.settings.SCAN_ID_ATTEMPTS)):
            job = ScanJob(
                id=self._id_factory(),
                target=target,
                options=options,
                status=ScanStatus.running,
                progress=0,
                created_at=datetime.now(timezone.utc),
            )
            if self.store.insert(job):
                return job
            logger.warning("scan id collision on %s; regenerating", job.id)
        raise RuntimeError("could not allocate a unique scan id")

    def _driver_done(self, task: asyncio.Task) -> None:
        self._drivers.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("progress driver crashed", exc_info=exc)

    def get_scan(self, scan_id: str) -> ScanJob:
        job = self.store.get(scan_id)
        if job is None:
            raise NotFound("Scan not found")
        return job

    def list_scans(self) -> List[ScanJob]:
        return self.store.list()

    def delete_scan(self, scan_id: str) -> None:
        if not self.store.delete(scan_id):
            raise NotFound("Scan not found")
        logger.info("[SCAN %s] deleted", scan_id)

    def get_report(self, scan_id: str) -> ScanReport:
        job = self.get_scan(scan_id)
        if job.status is not ScanStatus.completed or job.results is None:
            raise NotReady("Scan not completed yet")
        return ScanReport(scan_id=job.id, results=job.results)

    async def shutdown(self) -> None:
        """Cancel drivers that are still ticking and wait for them to exit."""
        pending = list(self._drivers)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info("cancelled %d running scan driver(s)", len(pending))
