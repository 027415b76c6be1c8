"""
Catalog store error translation

Maps driver/ORM failures onto the catalog error taxonomy:
connection-level problems are TransientStoreError (the read path retries
them), everything else SQLAlchemy raises is PersistentStoreError.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import exc as sa_exc

from src.platform.exception.exceptions import PersistentStoreError, TransientStoreError


TRANSIENT_ERRORS = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.DisconnectionError,
    sa_exc.TimeoutError,
    ConnectionError,
    OSError,
)


def is_transient(error: BaseException) -> bool:
    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return True
    return isinstance(error, TRANSIENT_ERRORS)


@asynccontextmanager
async def translate_store_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except (sa_exc.SQLAlchemyError, OSError) as e:
        if is_transient(e):
            raise TransientStoreError(f'{operation} failed: {type(e).__name__}: {e}') from e
        raise PersistentStoreError(f'{operation} failed: {type(e).__name__}: {e}') from e
