# app/services/scan_engine.py
"""
Scan engine seam.

The driver asks an engine for findings once progress reaches 100. The only
engine shipped here is a simulation; a real one (port probing, vulnerability
checks) plugs in by implementing ``collect`` with the same signature.
Exceptions raised by ``collect`` turn the scan into ``failed``.
"""
from __future__ import annotations
import random
from typing import Any, Dict, Optional, Protocol

from app.schemas.scan import (
    RiskLevel,
    ScanResults,
    ScanSummary,
    VulnerabilityCounts,
)


class ScanEngine(Protocol):

    def collect(self, target: str, options: Optional[Dict[str, Any]],
                elapsed: float) -> ScanResults:
        ...


def format_duration(seconds: float) -> str:
    return f"{seconds:.2f}s"


class SimulatedScanEngine:
    """Placeholder findings with the real payload schema."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def collect(self, target: str, options: Optional[Dict[str, Any]],
                elapsed: float) -> ScanResults:
        r = self._rng
        return ScanResults(
            summary=ScanSummary(
                risk_score=r.randint(0, 99),
                risk_level=r.choice(list(RiskLevel)),
                target=target,
                scan_duration=format_duration(elapsed),
            ),
            vulnerabilities=VulnerabilityCounts(
                critical=r.randint(0, 2),
                high=r.randint(0, 4),
                medium=r.randint(0, 9),
                low=r.randint(0, 14),
            ),
            open_ports=r.randint(1, 10),
        )
