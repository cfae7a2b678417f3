from __future__ import annotations

import logging
from typing import Sequence

import psycopg2
import psycopg2.errors
import psycopg2.extras

from ..core.errors import ClientAlreadyExists, ClientNotFound
from ..core.models import Change, Client, RedirectURI, sort_redirect_uris_by_uri
from ..core.repository import Storer
from .repo_sql_errors import is_client_conflict, translate_redirect_uri_conflict
from .repo_sql_mapper import (
    client_to_params,
    redirect_uri_to_values,
    row_to_client,
    row_to_redirect_uri,
)
from .repo_sql_queries import (
    DELETE_CLIENT_SQL,
    GET_CLIENT_SQL,
    INSERT_CLIENT_SQL,
    INSERT_REDIRECT_URIS_SQL,
    LIST_REDIRECT_URIS_SQL,
    REMOVE_REDIRECT_URIS_SQL,
    build_update_client_sql,
)

logger = logging.getLogger(__name__)


class PostgresStorer(Storer):
    """
    Storer backed by PostgreSQL through a psycopg2 connection.

    The connection belongs to the caller, who is responsible for closing it.
    Each call runs in its own transaction: committed on success, rolled back
    on any exception.
    """

    def __init__(self, conn):
        self.conn = conn

    def create(self, client: Client) -> None:
        try:
            with self.conn, self.conn.cursor() as cur:
                cur.execute(INSERT_CLIENT_SQL, client_to_params(client))
        except psycopg2.errors.UniqueViolation as exc:
            if is_client_conflict(exc):
                raise ClientAlreadyExists(client.id) from exc
            raise

    def get(self, client_id: str) -> Client:
        with self.conn, self.conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            cur.execute(GET_CLIENT_SQL, (client_id,))
            row = cur.fetchone()
        if row is None:
            raise ClientNotFound(client_id)
        return row_to_client(row)

    def update(self, client_id: str, change: Change) -> None:
        # No existence check: updating an unknown client touches zero rows.
        statement = build_update_client_sql(client_id, change)
        if statement is None:
            return
        query, params = statement
        with self.conn, self.conn.cursor() as cur:
            cur.execute(query, params)

    def delete(self, client_id: str) -> None:
        with self.conn, self.conn.cursor() as cur:
            cur.execute(DELETE_CLIENT_SQL, (client_id,))

    def list_redirect_uris(self, client_id: str) -> list[RedirectURI]:
        with self.conn, self.conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            cur.execute(LIST_REDIRECT_URIS_SQL, (client_id,))
            rows = cur.fetchall()
        uris = [row_to_redirect_uri(r) for r in rows]
        sort_redirect_uris_by_uri(uris)
        return uris

    def add_redirect_uris(self, uris: Sequence[RedirectURI]) -> None:
        if not uris:
            return
        values = [redirect_uri_to_values(uri) for uri in uris]
        try:
            with self.conn, self.conn.cursor() as cur:
                psycopg2.extras.execute_values(
                    cur,
                    INSERT_REDIRECT_URIS_SQL,
                    values,
                    page_size=len(values),
                )
        except psycopg2.errors.UniqueViolation as exc:
            raise translate_redirect_uri_conflict(exc) from exc

    def remove_redirect_uris(self, ids: Sequence[str]) -> None:
        if not ids:
            return
        with self.conn, self.conn.cursor() as cur:
            cur.execute(REMOVE_REDIRECT_URIS_SQL, (list(ids),))
        logger.debug("Removed up to %d redirect URI(s)", len(ids))
