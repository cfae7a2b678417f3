from __future__ import annotations

import os
import secrets
from datetime import datetime, timezone
from itertools import count
from urllib.parse import urlsplit, urlunsplit

import psycopg2
import pytest
from psycopg2 import sql

from client_registry.core.models import Client, RedirectURI, apply, change_secret
from client_registry.db import Base, get_engine
from client_registry.infra.db import normalize_dsn
from client_registry.infra.repo_memory import MemoryStorer
from client_registry.infra.repo_sql import PostgresStorer
from client_registry.runtime_config import TEST_CONN_STRING_ENV_VAR

_ids = count(1)


def _with_database(url: str, database: str) -> str:
    parts = urlsplit(url)
    return urlunsplit(parts._replace(path=f"/{database}"))


def _postgres_storer():
    url = normalize_dsn(os.environ[TEST_CONN_STRING_ENV_VAR])
    if urlsplit(url).scheme not in ("postgres", "postgresql"):
        raise RuntimeError(f"{TEST_CONN_STRING_ENV_VAR} must begin with postgres://")

    database = f"clients_test_{secrets.token_hex(6)}"
    admin = psycopg2.connect(url)
    admin.autocommit = True
    with admin.cursor() as cur:
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(database)))

    test_url = _with_database(url, database)
    engine = get_engine(test_url)
    Base.metadata.create_all(engine)
    engine.dispose()

    conn = psycopg2.connect(test_url)
    try:
        yield PostgresStorer(conn)
    finally:
        conn.close()
        with admin.cursor() as cur:
            cur.execute(sql.SQL("DROP DATABASE {}").format(sql.Identifier(database)))
        admin.close()


@pytest.fixture(params=["memory", "postgres"])
def storer(request):
    if request.param == "memory":
        yield MemoryStorer()
        return
    if not os.getenv(TEST_CONN_STRING_ENV_VAR):
        pytest.skip(f"{TEST_CONN_STRING_ENV_VAR} not set")
    yield from _postgres_storer()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_client(fixed_now):
    def _make(secret: str = "test secret", **overrides) -> Client:
        fields = {
            "id": f"client-{next(_ids)}-{secrets.token_hex(4)}",
            "name": "Test Client",
            "confidential": True,
            "created_at": fixed_now,
            "created_by": "test",
            "created_by_ip": "127.0.0.1",
        }
        fields.update(overrides)
        return apply(change_secret(secret), Client(**fields))

    return _make


@pytest.fixture
def make_redirect_uri(fixed_now):
    def _make(client_id: str, uri: str | None = None, **overrides) -> RedirectURI:
        uri_id = overrides.pop("id", f"uri-{next(_ids)}-{secrets.token_hex(4)}")
        fields = {
            "id": uri_id,
            "uri": uri or f"https://example.com/{uri_id}/callback",
            "is_base_uri": False,
            "client_id": client_id,
            "created_at": fixed_now,
            "created_by": "test",
            "created_by_ip": "127.0.0.1",
        }
        fields.update(overrides)
        return RedirectURI(**fields)

    return _make
