"""Create clients and redirect_uris tables.

Revision ID: 0001_create_clients
Revises: 
Create Date: 2018-12-08
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_clients"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("secret_hash", sa.Text(), server_default="", nullable=False),
        sa.Column("secret_scheme", sa.Text(), server_default="", nullable=False),
        sa.Column("confidential", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("created_by", sa.Text(), server_default="", nullable=False),
        sa.Column("created_by_ip", sa.Text(), server_default="", nullable=False),
        sa.PrimaryKeyConstraint("id", name="clients_pkey"),
    )
    op.create_table(
        "redirect_uris",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("uri", sa.Text(), nullable=False),
        sa.Column("is_base_uri", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("client_id", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("created_by", sa.Text(), server_default="", nullable=False),
        sa.Column("created_by_ip", sa.Text(), server_default="", nullable=False),
        sa.PrimaryKeyConstraint("id", name="redirect_uris_pkey"),
    )
    op.create_index("ix_redirect_uris_client_id", "redirect_uris", ["client_id"])


def downgrade() -> None:
    op.drop_index("ix_redirect_uris_client_id", table_name="redirect_uris")
    op.drop_table("redirect_uris")
    op.drop_table("clients")
