# routers bundled for main.py
from .health import router as health
from .scans import router as scans

__all__ = ["health", "scans"]
