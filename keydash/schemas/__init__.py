"""Pydantic schemas used by the FastAPI application."""

from .api_key import (
    ApiKeyCreate,
    ApiKeyRecord,
    ApiKeyRename,
    ApiKeyUsage,
    OperationResult,
    ValidationResult,
)

__all__ = [
    "ApiKeyCreate",
    "ApiKeyRecord",
    "ApiKeyRename",
    "ApiKeyUsage",
    "OperationResult",
    "ValidationResult",
]
