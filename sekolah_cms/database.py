"""Engine + session factory. `configure()` rebinds everything to another URL (tests)."""
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from . import config
from .models import Base

log = logging.getLogger(__name__)

ENGINE: Optional[Engine] = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False)


def _make_engine(url: str) -> Engine:
    if url.startswith("sqlite:///"):
        Path(url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


def configure(url: Optional[str] = None) -> Engine:
    """(Re)create the engine for `url` (default: from env) and bind SessionLocal to it."""
    global ENGINE
    if ENGINE is not None:
        ENGINE.dispose()
    ENGINE = _make_engine(url or config.database_url())
    SessionLocal.configure(bind=ENGINE)
    return ENGINE


def get_engine() -> Engine:
    return ENGINE if ENGINE is not None else configure()


def init_db():
    Base.metadata.create_all(bind=get_engine())
    log.info("Database ready (%s)", get_engine().url.render_as_string(hide_password=True))


def get_db():
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def new_session() -> Session:
    """Independent session for background tasks and jobs."""
    get_engine()
    return SessionLocal()
