from __future__ import annotations

import psycopg2

from ..runtime_config import StorerSettings, load_settings


def normalize_dsn(database_url: str) -> str:
    dsn = database_url.replace("postgresql+psycopg2://", "postgresql://", 1)
    return dsn.replace("postgresql+psycopg://", "postgresql://", 1)


def get_connection(settings: StorerSettings | None = None):
    settings = settings or load_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is required to connect to Postgres")
    kwargs = {}
    if settings.statement_timeout_ms:
        kwargs["options"] = f"-c statement_timeout={settings.statement_timeout_ms}"
    return psycopg2.connect(normalize_dsn(settings.database_url), **kwargs)
