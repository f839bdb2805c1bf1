"""Repository for API key database operations."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from keydash.core.errors import KeyNotFoundError, StoreError
from keydash.core.security import generate_api_key, hash_api_key, mask_api_key
from keydash.models.api_key import ApiKey
from keydash.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _store_error(session: Session, operation: str, exc: SQLAlchemyError) -> StoreError:
    session.rollback()
    logger.error("API key %s failed: %s", operation, exc, exc_info=True)
    return StoreError(str(exc))


class ApiKeyRepository(BaseRepository[ApiKey]):
    """Manages API key persistence and retrieval."""

    def __init__(self) -> None:
        super().__init__(ApiKey)

    def list_all(self, session: Session) -> list[ApiKey]:
        """Return all API keys, newest first."""
        stmt = select(ApiKey).order_by(ApiKey.created_at.desc())
        try:
            return list(session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise _store_error(session, "listing", exc) from exc

    def get(self, session: Session, identifier: str) -> ApiKey | None:
        try:
            return super().get(session, identifier)
        except SQLAlchemyError as exc:
            raise _store_error(session, "lookup", exc) from exc

    def insert(self, session: Session, name: str, usage_limit: int) -> tuple[ApiKey, str]:
        """Mint a key, persist it, and return the record with the plaintext key.

        The plaintext key is not stored; this is the only place it is available.
        """
        plaintext = generate_api_key()
        now = datetime.now(timezone.utc)
        api_key = ApiKey(
            name=name,
            key_hash=hash_api_key(plaintext),
            key_hint=mask_api_key(plaintext),
            usage=0,
            usage_limit=usage_limit,
            created_at=now,
            updated_at=now,
        )
        try:
            created = self.add(session, api_key)
            session.commit()
        except SQLAlchemyError as exc:
            raise _store_error(session, "insert", exc) from exc

        logger.info("Created API key %s (%s)", created.id, created.key_hint)
        return created, plaintext

    def update_name(self, session: Session, key_id: str, name: str) -> None:
        """Rename an API key and refresh its updated_at timestamp."""
        stmt = (
            update(ApiKey)
            .where(ApiKey.id == key_id)
            .values(name=name, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        try:
            result = session.execute(stmt)
            if result.rowcount == 0:
                session.rollback()
                raise KeyNotFoundError(key_id)
            session.commit()
        except SQLAlchemyError as exc:
            raise _store_error(session, "rename", exc) from exc

    def delete_by_id(self, session: Session, key_id: str) -> None:
        """Permanently remove an API key."""
        stmt = delete(ApiKey).where(ApiKey.id == key_id)
        try:
            result = session.execute(stmt)
            if result.rowcount == 0:
                session.rollback()
                raise KeyNotFoundError(key_id)
            session.commit()
        except SQLAlchemyError as exc:
            raise _store_error(session, "delete", exc) from exc

        logger.info("Deleted API key %s", key_id)

    def find_by_key(self, session: Session, key: str) -> ApiKey | None:
        """Retrieve an API key by its plaintext value."""
        stmt = select(ApiKey).where(ApiKey.key_hash == hash_api_key(key))
        try:
            result = session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise _store_error(session, "validation lookup", exc) from exc
