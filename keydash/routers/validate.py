"""Endpoint that checks whether a submitted API key exists."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from keydash.core.errors import (
    CONFIGURATION_ERROR,
    INVALID_API_KEY,
    INVALID_REQUEST_FORMAT,
    KEY_REQUIRED,
    QUERY_FAILED,
    SERVER_ERROR,
    VALID_API_KEY,
    ConfigError,
    StoreError,
    validation_response,
)
from keydash.db import get_session_opener
from keydash.models.api_key import ApiKey
from keydash.repositories.api_key import ApiKeyRepository
from keydash.schemas.api_key import ApiKeyUsage, ValidationResult

router = APIRouter(tags=["Validation"])
_api_key_repository = ApiKeyRepository()
logger = logging.getLogger(__name__)


def _lookup(open_session: Callable[[], Session], key: str) -> ApiKey | None:
    with open_session() as session:
        api_key = _api_key_repository.find_by_key(session, key)
        if api_key is not None:
            session.expunge(api_key)
        return api_key


@router.post("/validate", response_model=ValidationResult)
async def validate_api_key(
    request: Request,
    open_session: Callable[[], Session] = Depends(get_session_opener),
) -> JSONResponse:
    """Look up a key and return its usage metadata without echoing the key."""

    try:
        body = await request.json()
    except ValueError:
        return validation_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_FORMAT)

    if not isinstance(body, dict):
        return validation_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_FORMAT)

    key = body.get("key")
    if not key:
        return validation_response(status.HTTP_400_BAD_REQUEST, KEY_REQUIRED)
    if not isinstance(key, str):
        return validation_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_FORMAT)

    try:
        api_key = await run_in_threadpool(_lookup, open_session, key)
    except ConfigError as exc:
        logger.error("Cannot validate API key: %s", exc)
        return validation_response(status.HTTP_500_INTERNAL_SERVER_ERROR, CONFIGURATION_ERROR)
    except StoreError:
        return validation_response(status.HTTP_500_INTERNAL_SERVER_ERROR, QUERY_FAILED)
    except Exception:
        logger.exception("Unexpected failure while validating API key")
        return validation_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR)

    if api_key is None:
        return validation_response(status.HTTP_404_NOT_FOUND, INVALID_API_KEY)

    result = ValidationResult(
        success=True,
        message=VALID_API_KEY,
        data=ApiKeyUsage.model_validate(api_key),
    )
    return JSONResponse(status_code=status.HTTP_200_OK, content=result.model_dump(mode="json"))
