import sys
import os
from logging.config import fileConfig
from sqlalchemy import create_engine, pool
from alembic import context
from dotenv import load_dotenv

load_dotenv(".env")
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from push_relay.config import settings
from push_relay.database import Base
from push_relay.models import device_token, webhook  # noqa: F401 register tables

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Same DB_URL (and sqlite fallback) the relay itself uses
db_url = settings.DB_URL
target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(url=db_url, target_metadata=target_metadata, literal_binds=True, compare_type=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    engine = create_engine(db_url, poolclass=pool.NullPool, future=True)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=db_url.startswith("sqlite"),
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
