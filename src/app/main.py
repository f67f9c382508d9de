import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from tortoise import Tortoise
from tortoise.contrib.fastapi import tortoise_exception_handlers

from .core import logging_config  # noqa: F401  configures the "app" logger
from .core.config import CORS_ORIGINS, DATABASE_URL, TORTOISE_MODELS
from .features.auth.router import router as auth_router
from .features.credentials.router import router as credentials_router
from .features.dashboard.router import router as dashboard_router
from .features.reports.router import router as reports_router

logger = logging.getLogger("app.main")  # This logger will inherit from 'app'

TORTOISE_ORM_CONFIG = {
    "connections": {"default": DATABASE_URL},
    "apps": {
        "models": {
            "models": TORTOISE_MODELS,
            "default_connection": "default",
        }
    },
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Connects Tortoise-ORM and creates the users and key-value tables if needed.
    """
    logger.info("Starting reports console...")
    await Tortoise.init(config=TORTOISE_ORM_CONFIG)
    await Tortoise.generate_schemas(safe=True)
    logger.info("Tortoise-ORM has been initialized.")

    yield

    await Tortoise.close_connections()
    logger.info("Tortoise-ORM connections have been closed.")


app = FastAPI(
    title="Reports Console API",
    description="Operator dashboard for submitting and scheduling reports on an external reporting service.",
    version="0.1.0",
    exception_handlers=tortoise_exception_handlers(),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.get("/_/health")
async def health():
    return Response(status_code=200)


@app.get("/_/metrics")
async def metrics():
    """Polled by the hosting platform; nothing is collected yet."""
    return Response(status_code=200)


app.include_router(auth_router, prefix="/api/v1")
app.include_router(credentials_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")
