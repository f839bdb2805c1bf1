from . import health, keys, validate  # noqa: F401

__all__ = ["health", "keys", "validate"]
