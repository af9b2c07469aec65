# app/core/logging.py
from __future__ import annotations
import logging
import logging.config
from contextvars import ContextVar
from typing import Optional
import uuid

# ── request context
_REQUEST_ID: ContextVar[str] = ContextVar("_REQUEST_ID", default="-")


def set_request_id(req_id: Optional[str] = None) -> str:
    rid = req_id or str(uuid.uuid4())
    _REQUEST_ID.set(rid)
    return rid


def get_request_id() -> str:
    return _REQUEST_ID.get()


class RequestContextFilter(logging.Filter):

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


def setup_logging(level: str = "INFO") -> None:
    fmt = "[%(levelname)s] %(asctime)s %(name)s rid=%(request_id)s :: %(message)s"
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ctx": {"()": RequestContextFilter},
        },
        "formatters": {"default": {"format": fmt}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "filters": ["ctx"],
                "formatter": "default",
            }
        },
        "loggers": {
            "": {  # root
                "handlers": ["console"],
                "level": level.upper(),
                "propagate": False,
            },
            "uvicorn": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            "uvicorn.error": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            # access lines come from our own middleware
            "uvicorn.access": {"handlers": [], "level": "WARNING", "propagate": False},
        },
    }
    logging.config.dictConfig(config)


def get_logger(name: str = "strix") -> logging.Logger:
    return logging.getLogger(name)


logger = get_logger("strix")
