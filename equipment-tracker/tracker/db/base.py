from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def create_db_engine(db_url: str, echo: bool = False) -> Engine:
    return create_engine(db_url, future=True, echo=echo)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """Create the equipment and transactions tables when they are missing.

    Existing tables are left untouched; there is no migration step.
    """
    # models register themselves on Base.metadata at import
    from tracker.db.models import equipment, transactions  # noqa: F401

    Base.metadata.create_all(bind=engine)


def database_file(engine: Engine) -> Optional[Path]:
    """Return the on-disk file behind a SQLite engine, or None for in-memory databases."""
    url = engine.url
    if url.get_backend_name() != "sqlite":
        return None
    if not url.database or url.database == ":memory:" or url.database.startswith("file::memory:"):
        return None
    return Path(url.database)
