import os
from typing import Literal

from pydantic import BaseModel, Field


DEFAULT_STORER = "memory"
TEST_CONN_STRING_ENV_VAR = "PG_TEST_DB"


class StorerSettings(BaseModel):
    storer: Literal["memory", "postgres"] = DEFAULT_STORER
    database_url: str = ""
    statement_timeout_ms: int = Field(default=0, ge=0)
    memory_lock_timeout_seconds: float | None = Field(default=None, gt=0)


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


def load_settings() -> StorerSettings:
    return StorerSettings(
        storer=os.getenv("CLIENTS_STORER", DEFAULT_STORER).strip().lower() or DEFAULT_STORER,
        database_url=os.getenv("DATABASE_URL", ""),
        statement_timeout_ms=int(os.getenv("CLIENTS_STATEMENT_TIMEOUT_MS", "0") or 0),
        memory_lock_timeout_seconds=_optional_float(
            os.getenv("CLIENTS_MEMORY_LOCK_TIMEOUT_SECONDS")
        ),
    )
