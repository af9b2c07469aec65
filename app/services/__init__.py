# scan lifecycle: store -> driver -> service
from .jobs import JobStore
from .scan_driver import ProgressDriver
from .scan_engine import ScanEngine, SimulatedScanEngine
from .scan_service import ScanService

__all__ = [
    "JobStore", "ProgressDriver", "ScanEngine", "SimulatedScanEngine",
    "ScanService",
]
