# app/services/jobs.py
from __future__ import annotations
import threading
from typing import Callable, Dict, List, Optional

from app.schemas.scan import ScanJob

Mutator = Callable[[ScanJob], Optional[ScanJob]]


class JobStore:
    """
    In-memory scan jobs keyed by id.

    Every method takes the same lock, so a reader never sees a half-applied
    update. Records go in and come out as deep copies; nobody outside the
    store holds the authoritative object.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._store: Dict[str, ScanJob] = {}  # scan_id -> ScanJob

    def put(self, job: ScanJob) -> None:
        snapshot = job.model_copy(deep=True)
        with self._lock:
            self._store[job.id] = snapshot

    def insert(self, job: ScanJob) -> bool:
        """Store ``job`` only if its id is free. Returns False on collision."""
        snapshot = job.model_copy(deep=True)
        with self._lock:
            if job.id in self._store:
                return False
            self._store[job.id] = snapshot
            return True

    def get(self, job_id: str) -> Optional[ScanJob]:
        with self._lock:
            job = self._store.get(job_id)
            return job.model_copy(deep=True) if job is not None else None

    def list(self) -> List[ScanJob]:
        """Newest first; equal timestamps keep insertion order."""
        with self._lock:
            jobs = [j.model_copy(deep=True) for j in self._store.values()]
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return jobs

    def delete(self, job_id: str) -> bool:
        with self._lock:
            return self._store.pop(job_id, None) is not None

    def update(self, job_id: str, mutator: Mutator) -> bool:
        """
        Apply ``mutator`` to a private copy of the record and swap it in.

        The mutator may edit the copy in place (returning None) or return a
        replacement. If it raises, the stored record is left untouched.
        Returns False, without calling the mutator, when the id is absent.
        """
        with self._lock:
            current = self._store.get(job_id)
            if current is None:
                return False
            draft = current.model_copy(deep=True)
            result = mutator(draft)
            self._store[job_id] = result if result is not None else draft
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, job_id: object) -> bool:
        with self._lock:
            return job_id in self._store
