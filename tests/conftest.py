"""Shared fixtures: an in-memory store wired into the application."""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from keydash.db import get_db, get_session_opener
from keydash.db.base import Base
from keydash.main import app


def _setup_in_memory_db() -> sessionmaker[Session]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def session_local() -> sessionmaker[Session]:
    return _setup_in_memory_db()


@pytest.fixture
def db_session(session_local: sessionmaker[Session]) -> Iterator[Session]:
    with session_local() as session:
        yield session


@pytest.fixture
def client(session_local: sessionmaker[Session]) -> Iterator[TestClient]:
    def override_get_db():
        with session_local() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_opener] = lambda: session_local

    yield TestClient(app)

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_session_opener, None)
