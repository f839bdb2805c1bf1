from functools import lru_cache
from typing import Callable, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from keydash.core.config import get_settings


@lru_cache
def get_engine(url: str) -> Engine:
    """Return the pooled engine for ``url``, creating it on first use."""
    settings = get_settings()
    return create_engine(
        url,
        echo=settings.store_echo,
        pool_size=settings.store_pool_size,
        pool_pre_ping=settings.store_pool_pre_ping,
        future=True,
    )


@lru_cache
def get_session_factory(url: str) -> sessionmaker[Session]:
    """Return the session factory bound to the engine for ``url``."""
    return sessionmaker(bind=get_engine(url), autocommit=False, autoflush=False, expire_on_commit=False)


def open_session() -> Session:
    """Open a session against the configured store.

    Raises ``ConfigError`` when the store credentials are missing or malformed.
    """
    return get_session_factory(get_settings().database_url)()


def get_db() -> Generator:
    """Provide a SQLAlchemy session scoped to the request lifecycle."""
    db = open_session()
    try:
        yield db
    finally:
        db.close()


def get_session_opener() -> Callable[[], Session]:
    """Provide the session opener for handlers that connect lazily."""
    return open_session
