"""
Translate PostgreSQL unique-violation errors into registry errors.

PostgreSQL names the violated constraint in ``diag.constraint_name`` and
describes the colliding key in ``diag.message_detail``, e.g.::

    Key (uri)=(https://example.com/cb) already exists.
"""
from __future__ import annotations

import logging
import re

from ..core.errors import RedirectURIAlreadyExists

logger = logging.getLogger(__name__)

CLIENTS_PKEY = "clients_pkey"
REDIRECT_URIS_PKEY = "redirect_uris_pkey"
REDIRECT_URIS_UNIQUE_URI = "redirect_uris_unique_uri"

# constraint -> the column it guards
REDIRECT_URI_CONSTRAINT_COLUMNS = {
    REDIRECT_URIS_PKEY: "id",
    REDIRECT_URIS_UNIQUE_URI: "uri",
}

KEY_EXISTS_DETAIL_RE = re.compile(
    r"^Key \((?P<column>[^)]*)\)=\((?P<value>.*)\) already exists\.$",
    re.DOTALL,
)


def constraint_name(err: Exception) -> str | None:
    diag = getattr(err, "diag", None)
    return getattr(diag, "constraint_name", None)


def is_client_conflict(err: Exception) -> bool:
    return constraint_name(err) == CLIENTS_PKEY


def translate_redirect_uri_conflict(err: Exception) -> RedirectURIAlreadyExists:
    """
    Build a RedirectURIAlreadyExists naming the conflicting id or uri.

    When the detail can't be parsed for the violated constraint, the returned
    error carries neither field, only the original error.
    """
    conflict = RedirectURIAlreadyExists(err=err)
    constraint = constraint_name(err)
    expected_column = REDIRECT_URI_CONSTRAINT_COLUMNS.get(constraint)
    if expected_column is None:
        logger.error(
            "Unexpected constraint %r for redirect URI conflict: %s", constraint, err
        )
        return conflict

    detail = getattr(getattr(err, "diag", None), "message_detail", None) or ""
    match = KEY_EXISTS_DETAIL_RE.match(detail.strip())
    if match is None:
        logger.error(
            "Redirect URI conflict detail did not match the expected pattern: constraint=%s detail=%r",
            constraint,
            detail,
        )
        return conflict

    column = match.group("column").strip()
    if column != expected_column:
        logger.error(
            "Unexpected column %r for redirect URI constraint %s", column, constraint
        )
        return conflict

    value = match.group("value").strip()
    if column == "id":
        return RedirectURIAlreadyExists(id=value, err=err)
    return RedirectURIAlreadyExists(uri=value, err=err)
