"""
Tests de los endpoints de diagnostico sobre la base SQLite de prueba.
"""
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from usersync.api.dependencies.sync_deps import get_schema_reconciler
from usersync.infrastructure.database.session import get_db


@pytest.fixture
def app(db_session, reconciler):
    from main import create_application
    application = create_application()

    async def _get_test_db():
        yield db_session

    application.dependency_overrides[get_db] = _get_test_db
    application.dependency_overrides[get_schema_reconciler] = lambda: reconciler
    yield application
    application.dependency_overrides.clear()


async def _get(app, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


@pytest.mark.asyncio
async def test_db_connectivity(app):
    response = await _get(app, "/test-db")

    assert response.status_code == 200
    assert response.json() == {"status": "success", "test_result": [{"solution": 2}]}


@pytest.mark.asyncio
async def test_db_schema_lists_columns(app, reconciler):
    await reconciler.reconcile("users", ["sync_id", "nickname"])

    response = await _get(app, "/test-db-schema")

    assert response.status_code == 200
    columns = response.json()["columns"]
    assert {"id", "sync_id", "updated_at", "nickname"} <= set(columns)


@pytest.mark.asyncio
async def test_db_schema_error_is_500(app, reconciler):
    reconciler.get_columns = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))

    response = await _get(app, "/test-db-schema")

    assert response.status_code == 500
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_health(app):
    response = await _get(app, "/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
