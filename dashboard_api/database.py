# dashboard_api/database.py
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import DeclarativeBase

from .config import settings

class Base(DeclarativeBase):
    pass

def make_engine(database_url: str) -> Engine:
    # SQLite connections are handed between FastAPI's threadpool workers,
    # so the same-thread check has to be switched off.
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)

def init_db(engine: Engine):
    """Creates the tables (and indexes) declared in models.py if they are missing."""
    from . import models  # noqa: F401  registers the tables on Base.metadata
    Base.metadata.create_all(bind=engine)

# The engine is the main entry point to the database.
engine = make_engine(settings.get_database_url())
