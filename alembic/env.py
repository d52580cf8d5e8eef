# alembic/env.py
# Migration environment: decorbook metadata, database URL from decorbook settings.
# SQLite (local runs) gets batch mode, since it cannot ALTER most columns in place.

import sys
import logging
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, pool
from alembic import context

# alembic is usually run from a checkout, so make the package importable
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from decorbook.core.config import settings
from decorbook.db.base import Base

# Registers the tables on Base.metadata
import decorbook.models.user
import decorbook.models.package
import decorbook.models.schedule
import decorbook.models.order

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

# alembic.ini carries no URL; DATABASE_URL always wins
database_url = settings.DATABASE_URL
config.set_main_option("sqlalchemy.url", database_url)


def _configure_options() -> dict:
    return {
        "target_metadata": Base.metadata,
        # price and amount columns are BigInteger; catch accidental narrowing
        "compare_type": True,
        "render_as_batch": database_url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Writes the migration SQL to stdout instead of executing it."""
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(database_url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **_configure_options())
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    logger.info("Generating offline migration SQL")
    run_migrations_offline()
else:
    logger.info("Applying migrations to the configured database")
    run_migrations_online()
