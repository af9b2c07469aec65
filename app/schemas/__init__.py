from .scan import (
    ScanStatus,
    RiskLevel,
    ScanSummary,
    VulnerabilityCounts,
    ScanResults,
    ScanJob,
    ScanCreate,
    ScanReport,
    HealthOut,
    ErrorOut,
)

__all__ = [
    "ScanStatus", "RiskLevel",
    "ScanSummary", "VulnerabilityCounts", "ScanResults", "ScanJob",
    "ScanCreate", "ScanReport", "HealthOut", "ErrorOut",
]
