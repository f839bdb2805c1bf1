"""Liveness endpoints reporting whether the key store is configured."""

from fastapi import APIRouter

from keydash.core.config import get_settings


router = APIRouter(tags=["Health"])


@router.get("/")
@router.get("/health")
def read_health() -> dict[str, str]:
    """Report service identity; never opens a store connection."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
        "store": "configured" if settings.store_configured else "unconfigured",
    }
