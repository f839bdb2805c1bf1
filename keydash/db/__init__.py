"""Database helpers and base objects."""

from .base import Base, metadata
from .session import get_db, get_engine, get_session_factory, get_session_opener, open_session

__all__ = [
    "Base",
    "get_db",
    "get_engine",
    "get_session_factory",
    "get_session_opener",
    "metadata",
    "open_session",
]
