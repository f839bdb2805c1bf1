"""Pydantic schemas for API key management."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiKeyCreate(BaseModel):
    """Request payload for creating a new API key."""

    name: str = Field(..., min_length=1, max_length=255, description="Human-readable name for the API key")
    limit: int = Field(..., ge=0, description="Usage limit stored with the key (not enforced)")


class ApiKeyRename(BaseModel):
    """Request payload for renaming an API key."""

    name: str = Field(..., min_length=1, max_length=255)


class ApiKeyRecord(BaseModel):
    """API key as returned by the list, get and create endpoints."""

    id: str
    name: str
    key: str = Field(..., description="Plaintext on creation, masked everywhere else")
    usage: int
    usage_limit: int
    created_at: datetime
    updated_at: datetime


class ApiKeyUsage(BaseModel):
    """Key metadata returned by validation, without the key itself."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    usage: int
    usage_limit: int
    created_at: datetime
    updated_at: datetime


class ValidationResult(BaseModel):
    """Envelope returned by the validation endpoint."""

    success: bool
    message: str
    data: Optional[ApiKeyUsage] = None


class OperationResult(BaseModel):
    """Acknowledgement for rename and delete."""

    success: bool = True
