"""
Tests del ciclo de vida de la aplicacion (inicio y cierre).
"""
from unittest.mock import AsyncMock

import pytest

from usersync.core import events
from usersync.core.config import settings


@pytest.fixture
def lifecycle_mocks(monkeypatch, tmp_path):
    init_db = AsyncMock()
    close_db = AsyncMock()
    monkeypatch.setattr(events, "init_db", init_db)
    monkeypatch.setattr(events, "close_db", close_db)
    monkeypatch.setattr(settings, "LOG_FILE", str(tmp_path / "app.log"))
    return init_db, close_db


def test_create_application_registers_routes():
    from main import create_application
    app = create_application()

    paths = {route.path for route in app.routes}
    assert {"/webhook/sheet-update", "/api/update-user", "/test-db", "/test-db-schema", "/health"} <= paths


@pytest.mark.asyncio
async def test_lifespan_initializes_and_closes_database(lifecycle_mocks):
    from main import create_application
    init_db, close_db = lifecycle_mocks
    app = create_application()

    async with app.router.lifespan_context(app):
        init_db.assert_awaited_once()
        close_db.assert_not_awaited()

    close_db.assert_awaited_once()


@pytest.mark.asyncio
async def test_startup_failure_propagates(lifecycle_mocks):
    from main import create_application
    init_db, close_db = lifecycle_mocks
    init_db.side_effect = RuntimeError("database down")
    app = create_application()

    with pytest.raises(RuntimeError):
        async with app.router.lifespan_context(app):
            pass

    close_db.assert_not_awaited()
