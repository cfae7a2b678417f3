"""Make redirect URIs unique across all clients.

Revision ID: 0003_unique_redirect_uris
Revises: 0002_add_client_name
Create Date: 2019-09-20
"""
from __future__ import annotations

from alembic import op

revision = "0003_unique_redirect_uris"
down_revision = "0002_add_client_name"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_unique_constraint("redirect_uris_unique_uri", "redirect_uris", ["uri"])


def downgrade() -> None:
    op.drop_constraint("redirect_uris_unique_uri", "redirect_uris", type_="unique")
