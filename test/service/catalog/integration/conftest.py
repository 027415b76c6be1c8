"""
Test-specific FastAPI application

Same routers and handlers as production, without touching a database at
startup. Tests override the container's store providers.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
import pytest

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🧪 [Test App] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Test App] Dependency injection wired')

    yield

    container.unwire()
    Logger.base.info('🛑 [Test App] Shutdown complete')


@pytest.fixture(scope='session')
def test_app() -> FastAPI:
    return create_app(lifespan=lifespan_for_tests, title_suffix=' (Test)')
