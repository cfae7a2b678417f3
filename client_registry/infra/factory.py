from __future__ import annotations

import logging

from ..core.repository import Storer
from ..runtime_config import StorerSettings, load_settings
from .db import get_connection
from .repo_memory import MemoryStorer
from .repo_sql import PostgresStorer

logger = logging.getLogger(__name__)


def build_storer(settings: StorerSettings | None = None, conn=None) -> Storer:
    """
    Build the Storer named by `settings`.

    For postgres, a caller-supplied `conn` is used as-is; otherwise a new
    connection is opened and ownership passes to the caller via
    ``storer.conn``.
    """
    settings = settings or load_settings()
    if settings.storer == "memory":
        logger.info("Using in-memory client storer")
        return MemoryStorer(lock_timeout=settings.memory_lock_timeout_seconds)
    logger.info("Using postgres client storer")
    return PostgresStorer(conn if conn is not None else get_connection(settings))
