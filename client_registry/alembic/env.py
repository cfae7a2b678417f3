from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config
from sqlalchemy.pool import NullPool

from client_registry.core import models  # noqa: F401  registers the tables on Base
from client_registry.db import Base
from client_registry.infra.db import normalize_dsn
from client_registry.logging_utils import configure_logging
from client_registry.runtime_config import load_settings

load_dotenv()

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)
else:
    configure_logging()

database_url = load_settings().database_url
if database_url:
    alembic_config.set_main_option(
        "sqlalchemy.url",
        normalize_dsn(database_url).replace("postgresql://", "postgresql+psycopg2://", 1),
    )

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=alembic_config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        alembic_config.get_section(alembic_config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
