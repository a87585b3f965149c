"""
Alembic environment for the activity log database.

Selects SQLite or the configured production URL from the MODE setting.
"""

from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context
import sys
from pathlib import Path

# Add the project root to the path so contract_tracker is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from contract_tracker.settings import MODE, SQLITE_DATABASE_URL, PRODUCTION_DATABASE_URL

from sqlmodel import SQLModel
from contract_tracker.logics.db import ActivityLogModel  # noqa: F401  registers the table

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

if MODE.upper() == "DEBUG":
    db_url = SQLITE_DATABASE_URL
    print(f"[Alembic] Using DEBUG mode - SQLite: {db_url}")
elif MODE.upper() == "PRODUCTION":
    if not PRODUCTION_DATABASE_URL:
        raise ValueError("[database] url is required for PRODUCTION mode")
    db_url = PRODUCTION_DATABASE_URL
    print("[Alembic] Using PRODUCTION mode")
else:
    raise ValueError(f"Invalid MODE: {MODE}. Must be DEBUG or PRODUCTION")

# Escape % as %% for Alembic's config parser
config.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL for the configured URL."""
    url = config.get_main_option("sqlalchemy.url")
    is_sqlite = url and url.startswith("sqlite")

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    url = config.get_main_option("sqlalchemy.url")
    is_sqlite = url and url.startswith("sqlite")

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=is_sqlite,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
