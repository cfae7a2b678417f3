from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def get_engine(database_url: str):
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql+psycopg2://", 1)
    elif database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return create_engine(database_url)
