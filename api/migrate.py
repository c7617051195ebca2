#!/usr/bin/env python3
"""
Bring the users schema up to the latest alembic revision.

Run from anywhere: paths are resolved relative to this file, and the target
database is DATABASE_URL (see database.py).
"""

from dotenv import load_dotenv
load_dotenv()

import os
import sys

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy.engine import Engine

API_DIR = os.path.dirname(os.path.abspath(__file__))


def alembic_config() -> Config:
    config = Config(os.path.join(API_DIR, "alembic.ini"))
    config.set_main_option("script_location", os.path.join(API_DIR, "migrations"))
    return config


def current_revision(engine: Engine):
    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def upgrade(engine: Engine, revision: str = "head"):
    """Upgrade the database behind `engine` and return the revision it ends on"""
    config = alembic_config()
    with engine.begin() as connection:
        # env.py runs on this connection instead of opening its own
        config.attributes["connection"] = connection
        command.upgrade(config, revision)
    return current_revision(engine)


def main():
    from database import engine

    before = current_revision(engine)
    print(f"Users schema at revision {before or '<empty>'}, upgrading...")
    after = upgrade(engine)
    if after == before:
        print("Users schema already up to date")
    else:
        print(f"Users schema upgraded to revision {after}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
