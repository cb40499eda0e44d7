from __future__ import annotations

from logging.config import fileConfig
import os
import sys

from alembic import context

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from hunterlog.core.config import settings
from hunterlog.database.base import Base
from hunterlog.database.session import engine as app_engine
from hunterlog.core.auth import models as auth_models  # noqa: F401
from hunterlog.core.missions import models as missions_models  # noqa: F401
from hunterlog.core.quests import models as quests_models  # noqa: F401
from hunterlog.core.hunts import models as hunts_models  # noqa: F401
from hunterlog.core.skills import models as skills_models  # noqa: F401
from hunterlog.core.achievements import models as achievements_models  # noqa: F401
from hunterlog.core.activity import models as activity_models  # noqa: F401


config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


target_metadata = Base.metadata

# SQLite cannot ALTER most column properties in place.
RENDER_AS_BATCH = settings.database_url.startswith("sqlite")


def run_migrations_offline() -> None:
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=RENDER_AS_BATCH,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with app_engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=RENDER_AS_BATCH,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
