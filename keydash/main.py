import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from keydash.core.config import get_settings
from keydash.core.errors import register_exception_handlers
from keydash.routers import health, keys, validate


logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.store_configured:
        logger.warning(
            "Store credentials are not configured; requests needing the store will fail "
            "until KEYDASH_STORE_URL and KEYDASH_STORE_TOKEN are set"
        )
    yield


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.resolved_cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(keys.router)
app.include_router(validate.router)
app.include_router(health.router)

