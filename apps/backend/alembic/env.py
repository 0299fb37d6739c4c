"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: alembic/env.py (Alembic Environment Configuration)

Responsibilities:
  - Correr las migraciones del registro de sujetos (online/offline).
  - Usar la MISMA DATABASE_URL que la app (Settings), con driver psycopg 3.
  - Migrar en UTC, igual que las conexiones del pool de la app.

Collaborators:
  - Alembic (context, config)
  - SQLAlchemy (create_engine / make_url), solo para migraciones
  - subject_registry.crosscutting.config.get_settings

Policy:
  - Sin ORM: migraciones escritas a mano (target_metadata = None).
============================================================
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool, text
from sqlalchemy.engine import URL, make_url

from subject_registry.crosscutting.config import get_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Migraciones manuales: autogenerate no aplica.
target_metadata = None

_DRIVER = "postgresql+psycopg"


def database_url() -> URL:
    """postgres:// o postgresql:// de Settings -> postgresql+psycopg://."""
    url = make_url(get_settings().database_url)
    if url.drivername in {"postgres", "postgresql"}:
        url = url.set(drivername=_DRIVER)
    return url


def run_migrations_offline() -> None:
    """Emite SQL (alembic upgrade --sql) sin conectarse."""
    context.configure(
        url=database_url().render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(database_url(), poolclass=pool.NullPool)

    with engine.connect() as connection:
        connection.execute(text("SET TIME ZONE 'UTC'"))
        connection.commit()
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()

    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
