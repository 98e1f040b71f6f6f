"""MerchShop API — application factory and ASGI entry point.

Invariants:
    - Routers are included explicitly: health, auth, shop
    - The ledger store engine exists only between lifespan start and shutdown;
      shutdown disposes its connection pool
    - Every exception leaving a route is rendered by api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import merchshop.infrastructure.database as database
from merchshop.api.error_handlers import register_error_handlers
from merchshop.api.routes import auth, health, shop
from merchshop.config import Settings, get_settings
from merchshop.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"MerchShop API started, starting balance {settings.starting_balance}")
    try:
        yield
    finally:
        if database.db_manager is not None:
            await database.db_manager.engine.dispose()
        logger.info("MerchShop API stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    application = FastAPI(title="MerchShop API", version="1.0.0", lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )
    for module in (health, auth, shop):
        application.include_router(module.router)
    register_error_handlers(application)
    return application


app = create_app()
