# app/schemas/scan.py
from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScanStatus(str, Enum):
    running = "running"
    completed = "completed"
    failed = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ScanStatus.running


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ScanSummary(CamelModel):
    risk_score: int = Field(..., ge=0, le=99)
    risk_level: RiskLevel
    target: str
    scan_duration: str = Field(..., description="elapsed time, e.g. '5.02s'")


class VulnerabilityCounts(CamelModel):
    critical: int = Field(0, ge=0)
    high: int = Field(0, ge=0)
    medium: int = Field(0, ge=0)
    low: int = Field(0, ge=0)


class ScanResults(CamelModel):
    summary: ScanSummary
    vulnerabilities: VulnerabilityCounts
    open_ports: int = Field(..., ge=1)


class ScanJob(CamelModel):
    id: str
    target: str
    options: Optional[Dict[str, Any]] = Field(default_factory=dict)
    status: ScanStatus = ScanStatus.running
    progress: int = Field(0, ge=0, le=100)
    results: Optional[ScanResults] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    # only present on failed scans
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @model_serializer(mode="wrap")
    def _omit_empty_error(self, handler):
        data = handler(self)
        if self.error is None:
            data.pop("error", None)
        return data


# ---------- I/O Schemas ----------
class ScanCreate(BaseModel):
    # target is checked by the service so a missing one maps to 400, not 422
    target: Optional[str] = None
    options: Optional[Dict[str, Any]] = None


class ScanReport(CamelModel):
    message: str = "PDF report available"
    scan_id: str
    results: ScanResults


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
    version: str


class ErrorOut(BaseModel):
    error: str
