"""Error kinds raised by the store layer and their HTTP mapping."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Caller-facing messages. Underlying store text is logged, never returned.
INVALID_REQUEST_FORMAT = "invalid request format"
KEY_REQUIRED = "key required"
INVALID_API_KEY = "invalid API key"
VALID_API_KEY = "valid API key"
QUERY_FAILED = "database query failed"
OPERATION_FAILED = "database operation failed"
CONFIGURATION_ERROR = "server configuration error"
SERVER_ERROR = "server error"
KEY_NOT_FOUND = "API key not found"


class KeydashError(Exception):
    """Base class for errors raised by the key management service."""


class ConfigError(KeydashError):
    """Raised when the store credentials are missing."""


class StoreError(KeydashError):
    """Raised when the store rejects a statement or cannot be reached."""


class KeyNotFoundError(KeydashError):
    """Raised when no API key row matches the given identifier."""

    def __init__(self, key_id: str):
        super().__init__(f"API key {key_id} not found")
        self.key_id = key_id


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{"error": ...}`` envelope used by the key CRUD endpoints."""

    return JSONResponse(status_code=status_code, content={"error": message})


def validation_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{"success": false, ...}`` envelope used by key validation."""

    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


async def _handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, OPERATION_FAILED)


async def _handle_config_error(request: Request, exc: ConfigError) -> JSONResponse:
    logger.error("Configuration error on %s %s: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, CONFIGURATION_ERROR)


async def _handle_key_not_found(request: Request, exc: KeyNotFoundError) -> JSONResponse:
    logger.info("API key %s not found on %s %s", exc.key_id, request.method, request.url.path)
    return error_response(status.HTTP_404_NOT_FOUND, KEY_NOT_FOUND)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the service's error mapping to the application."""

    app.add_exception_handler(StoreError, _handle_store_error)
    app.add_exception_handler(ConfigError, _handle_config_error)
    app.add_exception_handler(KeyNotFoundError, _handle_key_not_found)
