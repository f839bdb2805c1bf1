"""Helpers for minting, digesting and masking API keys."""

from __future__ import annotations

import hashlib
import uuid

API_KEY_PREFIX = "sk-"
_MASK_LENGTH = 20
_VISIBLE_SUFFIX = 4


def generate_api_key() -> str:
    """Generate a new API key with the format: sk-{uuid4}."""
    return f"{API_KEY_PREFIX}{uuid.uuid4()}"


def hash_api_key(api_key: str) -> str:
    """Return the SHA-256 hex digest stored in place of the plaintext key.

    The key carries a random UUID, so an unsalted digest is sufficient and
    keeps lookups a single indexed equality match.
    """
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


def mask_api_key(api_key: str) -> str:
    """Return the display form: the first three characters, 20 stars, the last four."""
    prefix = api_key[: len(API_KEY_PREFIX)]
    suffix = api_key[-_VISIBLE_SUFFIX:] if len(api_key) > _VISIBLE_SUFFIX else ""
    return f"{prefix}{'*' * _MASK_LENGTH}{suffix}"
