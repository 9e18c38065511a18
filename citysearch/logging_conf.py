# -*- coding: utf-8 -*-
"""
structlog setup for the suggestion service.

Request handlers bind per-request fields (q, located) with
structlog.contextvars.bound_contextvars; merge_contextvars puts them on every line
logged while the request is in flight.
"""
import logging, os, sys
from typing import List

import structlog

SERVICE = "citysearch"
# uvicorn owns these; they follow our level so one LOG_LEVEL controls the process
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _add_service(_, __, event_dict):
    event_dict.setdefault("service", SERVICE)
    return event_dict


def build_processors(fmt: str) -> List:
    chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "plain":
        chain.append(structlog.processors.KeyValueRenderer(key_order=["event", "level", "timestamp"]))
    else:
        chain.append(structlog.processors.JSONRenderer(sort_keys=True))
    return chain


def setup_logging(level: str | None = None, fmt: str | None = None):
    """LOG_LEVEL / LOG_FORMAT (json | plain) unless given explicitly."""
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    fmt = (fmt or os.getenv("LOG_FORMAT") or "json").lower()

    # stdlib side: loader warnings (gazetteer) and uvicorn's own lines
    logging.basicConfig(stream=sys.stdout, level=numeric, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    for lname in UVICORN_LOGGERS:
        logging.getLogger(lname).setLevel(numeric)
    # per-request access lines duplicate our "suggestions" event
    logging.getLogger("uvicorn.access").disabled = fmt == "json"

    structlog.configure(
        processors=build_processors(fmt),
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        # no file= here: resolve sys.stdout when each logger is built
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
