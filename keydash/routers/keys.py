"""API key management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from keydash.core.errors import KeyNotFoundError
from keydash.db import get_db
from keydash.models.api_key import ApiKey
from keydash.repositories.api_key import ApiKeyRepository
from keydash.schemas.api_key import ApiKeyCreate, ApiKeyRecord, ApiKeyRename, OperationResult

router = APIRouter(prefix="/keys", tags=["API Keys"])
_api_key_repository = ApiKeyRepository()


def _to_record(api_key: ApiKey, key: str | None = None) -> ApiKeyRecord:
    return ApiKeyRecord(
        id=api_key.id,
        name=api_key.name,
        key=key if key is not None else api_key.key_hint,
        usage=api_key.usage,
        usage_limit=api_key.usage_limit,
        created_at=api_key.created_at,
        updated_at=api_key.updated_at,
    )


@router.get("", response_model=list[ApiKeyRecord])
def list_api_keys(db: Session = Depends(get_db)) -> list[ApiKeyRecord]:
    """List all API keys, newest first, with masked key values."""

    return [_to_record(api_key) for api_key in _api_key_repository.list_all(db)]


@router.post("", response_model=ApiKeyRecord)
def create_api_key(payload: ApiKeyCreate, db: Session = Depends(get_db)) -> ApiKeyRecord:
    """Create a new API key. The plaintext key is returned only here."""

    created_key, plaintext = _api_key_repository.insert(db, payload.name, payload.limit)
    return _to_record(created_key, key=plaintext)


@router.get("/{key_id}", response_model=ApiKeyRecord)
def get_api_key(key_id: str, db: Session = Depends(get_db)) -> ApiKeyRecord:
    """Fetch a single API key with its masked key value."""

    api_key = _api_key_repository.get(db, key_id)
    if api_key is None:
        raise KeyNotFoundError(key_id)
    return _to_record(api_key)


@router.put("/{key_id}", response_model=OperationResult)
def rename_api_key(key_id: str, payload: ApiKeyRename, db: Session = Depends(get_db)) -> OperationResult:
    _api_key_repository.update_name(db, key_id, payload.name)
    return OperationResult()


@router.delete("/{key_id}", response_model=OperationResult)
def delete_api_key(key_id: str, db: Session = Depends(get_db)) -> OperationResult:
    _api_key_repository.delete_by_id(db, key_id)
    return OperationResult()
