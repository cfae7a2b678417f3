from __future__ import annotations

from psycopg2 import sql

from ..core.models import Change

CLIENT_COLUMNS = (
    "id",
    "name",
    "secret_hash",
    "secret_scheme",
    "confidential",
    "created_at",
    "created_by",
    "created_by_ip",
)

REDIRECT_URI_COLUMNS = (
    "id",
    "uri",
    "is_base_uri",
    "client_id",
    "created_at",
    "created_by",
    "created_by_ip",
)

# Change field -> clients column
CHANGE_COLUMNS = {
    "name": "name",
    "secret_hash": "secret_hash",
    "secret_scheme": "secret_scheme",
}

INSERT_CLIENT_SQL = """
INSERT INTO clients (
    id, name, secret_hash, secret_scheme, confidential,
    created_at, created_by, created_by_ip
)
VALUES (
    %(id)s, %(name)s, %(secret_hash)s, %(secret_scheme)s, %(confidential)s,
    %(created_at)s, %(created_by)s, %(created_by_ip)s
)
"""

GET_CLIENT_SQL = """
SELECT id, name, secret_hash, secret_scheme, confidential,
       created_at, created_by, created_by_ip
FROM clients
WHERE id = %s
"""

DELETE_CLIENT_SQL = "DELETE FROM clients WHERE id = %s"

LIST_REDIRECT_URIS_SQL = """
SELECT id, uri, is_base_uri, client_id, created_at, created_by, created_by_ip
FROM redirect_uris
WHERE client_id = %s
ORDER BY uri
"""

# execute_values expands the single VALUES %s into one row per redirect URI
INSERT_REDIRECT_URIS_SQL = """
INSERT INTO redirect_uris (
    id, uri, is_base_uri, client_id, created_at, created_by, created_by_ip
)
VALUES %s
"""

REMOVE_REDIRECT_URIS_SQL = "DELETE FROM redirect_uris WHERE id = ANY(%s)"


def build_update_client_sql(client_id: str, change: Change) -> tuple[sql.Composed, list[object]] | None:
    """
    Build an UPDATE that sets only the columns present in `change`.

    Returns None for an empty Change; there is nothing to run.
    """
    updates = change.updates()
    if not updates:
        return None
    assignments = []
    params: list[object] = []
    for field_name, column in CHANGE_COLUMNS.items():
        if field_name not in updates:
            continue
        assignments.append(
            sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder())
        )
        params.append(updates[field_name])
    params.append(client_id)
    query = sql.SQL("UPDATE clients SET {assignments} WHERE id = {id}").format(
        assignments=sql.SQL(", ").join(assignments),
        id=sql.Placeholder(),
    )
    return query, params
