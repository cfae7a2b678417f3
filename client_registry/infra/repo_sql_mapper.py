from __future__ import annotations

from ..core.models import Client, RedirectURI


def row_to_client(row) -> Client:
    return Client(
        id=row["id"],
        name=row["name"],
        secret_hash=row["secret_hash"],
        secret_scheme=row["secret_scheme"],
        confidential=row["confidential"],
        created_at=row["created_at"],
        created_by=row["created_by"],
        created_by_ip=row["created_by_ip"],
    )


def row_to_redirect_uri(row) -> RedirectURI:
    return RedirectURI(
        id=row["id"],
        uri=row["uri"],
        is_base_uri=row["is_base_uri"],
        client_id=row["client_id"],
        created_at=row["created_at"],
        created_by=row["created_by"],
        created_by_ip=row["created_by_ip"],
    )


def client_to_params(client: Client) -> dict[str, object]:
    return client.model_dump()


def redirect_uri_to_values(uri: RedirectURI) -> tuple:
    return (
        uri.id,
        uri.uri,
        uri.is_base_uri,
        uri.client_id,
        uri.created_at,
        uri.created_by,
        uri.created_by_ip,
    )
