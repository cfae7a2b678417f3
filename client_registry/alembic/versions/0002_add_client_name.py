"""Add name to clients.

Revision ID: 0002_add_client_name
Revises: 0001_create_clients
Create Date: 2019-08-16
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_add_client_name"
down_revision = "0001_create_clients"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "clients",
        sa.Column("name", sa.Text(), server_default="", nullable=False),
    )


def downgrade() -> None:
    op.drop_column("clients", "name")
