from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import psycopg
import pytest

from courtmate.db.helpers import DatabaseError, fetch_all, with_db_retry


class _FailingPool:
    def __init__(self, error: Exception):
        self.error = error

    @asynccontextmanager
    async def connection(self):
        raise self.error
        yield


@pytest.mark.asyncio
async def test_connection_errors_are_recoverable(monkeypatch):
    pool = _FailingPool(psycopg.OperationalError("server closed the connection"))
    monkeypatch.setattr("courtmate.db.helpers.db_pool", pool)

    with pytest.raises(DatabaseError) as exc_info:
        await fetch_all("SELECT 1")

    assert exc_info.value.recoverable is True
    assert exc_info.value.operation == "fetch_all"


@pytest.mark.asyncio
async def test_query_errors_are_not_recoverable(monkeypatch):
    pool = _FailingPool(psycopg.ProgrammingError("column does not exist"))
    monkeypatch.setattr("courtmate.db.helpers.db_pool", pool)

    with pytest.raises(DatabaseError) as exc_info:
        await fetch_all("SELECT missing FROM user_availability")

    assert exc_info.value.recoverable is False


@pytest.mark.asyncio
async def test_retry_recovers_after_transient_failures(monkeypatch):
    monkeypatch.setattr("courtmate.db.helpers.asyncio.sleep", AsyncMock())
    operation = AsyncMock(
        side_effect=[
            DatabaseError("connection lost", recoverable=True),
            DatabaseError("connection lost", recoverable=True),
            [{"id": 1}],
        ]
    )

    result = await with_db_retry(max_retries=3)(operation)()

    assert result == [{"id": 1}]
    assert operation.await_count == 3


@pytest.mark.asyncio
async def test_retry_skips_unrecoverable_errors(monkeypatch):
    sleep = AsyncMock()
    monkeypatch.setattr("courtmate.db.helpers.asyncio.sleep", sleep)
    operation = AsyncMock(side_effect=DatabaseError("syntax error"))

    with pytest.raises(DatabaseError):
        await with_db_retry(max_retries=3)(operation)()

    assert operation.await_count == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_retry_gives_up_after_max_retries(monkeypatch):
    monkeypatch.setattr("courtmate.db.helpers.asyncio.sleep", AsyncMock())
    operation = AsyncMock(side_effect=DatabaseError("connection lost", recoverable=True))

    with pytest.raises(DatabaseError):
        await with_db_retry(max_retries=2)(operation)()

    assert operation.await_count == 3
