import pytest
from sqlalchemy import exc as sa_exc

from src.platform.exception.exceptions import PersistentStoreError, TransientStoreError
from src.service.catalog.driven_adapter.repo.store_error_translator import (
    is_transient,
    translate_store_errors,
)


pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    'error, transient',
    [
        (sa_exc.OperationalError('SELECT 1', {}, Exception('server closed')), True),
        (sa_exc.InterfaceError('SELECT 1', {}, Exception('closed')), True),
        (sa_exc.TimeoutError('QueuePool limit reached'), True),
        (ConnectionRefusedError('refused'), True),
        (sa_exc.DBAPIError('SELECT 1', {}, Exception('x'), connection_invalidated=True), True),
        (sa_exc.IntegrityError('INSERT', {}, Exception('duplicate key')), False),
        (sa_exc.ProgrammingError('SELECT', {}, Exception('no such column')), False),
    ],
)
def test_is_transient(error, transient):
    assert is_transient(error) is transient


@pytest.mark.asyncio
async def test_connection_failure_becomes_transient_store_error():
    with pytest.raises(TransientStoreError) as exc_info:
        async with translate_store_errors('list_page'):
            raise sa_exc.OperationalError('SELECT', {}, Exception('connection refused'))

    assert exc_info.value.message.startswith('list_page failed: OperationalError')
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_constraint_violation_becomes_persistent_store_error():
    with pytest.raises(PersistentStoreError, match='upsert_categories failed: IntegrityError'):
        async with translate_store_errors('upsert_categories'):
            raise sa_exc.IntegrityError('INSERT', {}, Exception('foreign key'))


@pytest.mark.asyncio
async def test_other_errors_pass_through():
    with pytest.raises(KeyError):
        async with translate_store_errors('get_by_id'):
            raise KeyError('event_id')
