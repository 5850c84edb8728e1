from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from tiri.core.config import settings
from tiri.db.base import Base
import tiri.models  # noqa: F401  registers the tables on Base.metadata

config = context.config

# keep the "tiri" logger alive when migrations run inside the app or tests
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def database_url() -> str:
    """``alembic -x db_url=...`` wins over ``DATABASE_URL``."""
    return context.get_x_argument(as_dictionary=True).get("db_url") or settings.DATABASE_URL


def configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # sqlite cannot ALTER most constraints in place
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline():
    url = database_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    url = database_url()
    connectable = engine_from_config(
        {"sqlalchemy.url": url},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, **configure_options(url))

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
