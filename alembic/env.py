"""Alembic environment configuration for job creation schema migrations."""
# pylint: disable=no-member,invalid-name,wrong-import-order

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from sync_jobs.config import config_load_database_url

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name, disable_existing_loggers=False)

alembic_config.set_main_option("sqlalchemy.url", config_load_database_url())

# Tables are declared in raw migrations; there is no ORM metadata to autogenerate from.
target_metadata = None


def _migration_configure_options() -> dict:
    return {"target_metadata": target_metadata, "compare_type": True, "transaction_per_migration": True}


def run_migrations_offline() -> None:
    """Emit migration SQL without a database connection."""

    context.configure(
        url=alembic_config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_migration_configure_options(),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the configured job database."""

    connectable = engine_from_config(
        alembic_config.get_section(alembic_config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    try:
        with connectable.connect() as connection:
            context.configure(connection=connection, **_migration_configure_options())
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
