from __future__ import annotations

import logging
from typing import Sequence

from ..core.errors import ClientAlreadyExists, ClientNotFound, RedirectURIAlreadyExists
from ..core.models import Change, Client, RedirectURI, apply, sort_redirect_uris_by_uri
from ..core.repository import Storer
from .memdb import IndexSchema, MemDB, Schema, TableSchema

logger = logging.getLogger(__name__)

CLIENT_TABLE = "client"
REDIRECT_URI_TABLE = "redirect_uri"

SCHEMA = Schema(
    tables=(
        TableSchema(name=CLIENT_TABLE, primary_key="id"),
        TableSchema(
            name=REDIRECT_URI_TABLE,
            primary_key="id",
            indexes=(
                IndexSchema(name="uri", field="uri", unique=True),
                IndexSchema(name="client_id", field="client_id"),
            ),
        ),
    )
)


class MemoryStorer(Storer):
    """In-memory Storer; every call runs in its own MemDB transaction."""

    def __init__(self, lock_timeout: float | None = None) -> None:
        self.db = MemDB(SCHEMA, lock_timeout=lock_timeout)

    def create(self, client: Client) -> None:
        with self.db.txn(write=True) as txn:
            if txn.first(CLIENT_TABLE, "id", client.id) is not None:
                raise ClientAlreadyExists(client.id)
            txn.insert(CLIENT_TABLE, client)

    def get(self, client_id: str) -> Client:
        with self.db.txn() as txn:
            client = txn.first(CLIENT_TABLE, "id", client_id)
        if client is None:
            raise ClientNotFound(client_id)
        return client

    def update(self, client_id: str, change: Change) -> None:
        if change.is_empty():
            return
        with self.db.txn(write=True) as txn:
            client = txn.first(CLIENT_TABLE, "id", client_id)
            if client is None:
                return
            txn.insert(CLIENT_TABLE, apply(change, client))

    def delete(self, client_id: str) -> None:
        with self.db.txn(write=True) as txn:
            client = txn.first(CLIENT_TABLE, "id", client_id)
            if client is None:
                return
            txn.delete(CLIENT_TABLE, client)

    def list_redirect_uris(self, client_id: str) -> list[RedirectURI]:
        with self.db.txn() as txn:
            uris = txn.get(REDIRECT_URI_TABLE, "client_id", client_id)
        sort_redirect_uris_by_uri(uris)
        return uris

    def add_redirect_uris(self, uris: Sequence[RedirectURI]) -> None:
        if not uris:
            return
        with self.db.txn(write=True) as txn:
            for uri in uris:
                if txn.first(REDIRECT_URI_TABLE, "id", uri.id) is not None:
                    logger.debug("Rejecting redirect URI batch: id %s exists", uri.id)
                    raise RedirectURIAlreadyExists(id=uri.id)
                if txn.first(REDIRECT_URI_TABLE, "uri", uri.uri) is not None:
                    logger.debug("Rejecting redirect URI batch: uri %s exists", uri.uri)
                    raise RedirectURIAlreadyExists(uri=uri.uri)
                txn.insert(REDIRECT_URI_TABLE, uri)

    def remove_redirect_uris(self, ids: Sequence[str]) -> None:
        if not ids:
            return
        with self.db.txn(write=True) as txn:
            for uri_id in ids:
                uri = txn.first(REDIRECT_URI_TABLE, "id", uri_id)
                if uri is None:
                    continue
                txn.delete(REDIRECT_URI_TABLE, uri)
