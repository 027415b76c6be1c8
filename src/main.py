"""
Production FastAPI Application

Event catalog: public event reads and the admin create-or-update write path.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engines
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Event Catalog] Starting up...')

    # Wire dependency injection for all modules
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Event Catalog] Dependency injection wired')

    if settings.DB_CREATE_TABLES_ON_STARTUP:
        await create_db_and_tables()
        Logger.base.info('🗄️  [Event Catalog] Database tables ensured')

    Logger.base.info(f'🖼️ [Event Catalog] Blob store backend: {settings.BLOB_STORE_BACKEND}')
    Logger.base.info('✅ [Event Catalog] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Event Catalog] Shutting down...')

    await dispose_engines()
    Logger.base.info('🗄️  [Event Catalog] Database engines disposed')

    # Unwire DI
    container.unwire()

    Logger.base.info('👋 [Event Catalog] Shutdown complete')


# Create FastAPI app using shared factory
app = create_app(
    lifespan=lifespan,
    description='Event Catalog - paginated event listings, event details with seat categories, '
    'and the admin create-or-update workflow',
)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
