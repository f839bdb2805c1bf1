"""Repository exports."""

from .api_key import ApiKeyRepository

__all__ = ["ApiKeyRepository"]
