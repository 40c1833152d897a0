from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine

from ovaldict.config import build_database_url, settings
from ovaldict.db import Base
from ovaldict import models  # noqa: F401
from ovaldict import schema  # noqa: F401  (attaches lookup indexes)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _url():
    return build_database_url(settings.db_type, settings.db_path)


def run_migrations_offline() -> None:
    context.configure(url=_url(), target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connect_args = {}
    if "://" not in settings.db_path and settings.db_type == "postgres":
        connect_args["conninfo"] = settings.db_path
    engine = create_engine(_url(), connect_args=connect_args)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
