"""
Tests unitarios del contrato HTTP de los endpoints de sincronizacion.

Los casos de uso se reemplazan via dependency_overrides: aqui solo se
verifica la traduccion a codigos y cuerpos de respuesta.
"""
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from usersync.api.dependencies.sync_deps import get_user_sync_use_cases
from usersync.application.services.record_upsert import UpsertOutcome
from usersync.shared.exceptions.domain import (
    InvalidColumnNameException,
    MissingSyncIdException,
    RecordNotFoundException,
)
from usersync.shared.exceptions.infrastructure import RecordUpsertException, SchemaSyncException


@pytest.fixture
def mock_use_cases() -> AsyncMock:
    uc = AsyncMock()
    uc.ingest_sheet_update = AsyncMock(return_value=UpsertOutcome.CREATED)
    uc.apply_dashboard_update = AsyncMock(return_value=UpsertOutcome.UPDATED)
    return uc


@pytest.fixture
def app_with_mock(mock_use_cases: AsyncMock):
    """Crea la app FastAPI con el caso de uso mockeado via dependency_overrides."""
    from main import create_application
    app = create_application()
    app.dependency_overrides[get_user_sync_use_cases] = lambda: mock_use_cases
    yield app
    app.dependency_overrides.clear()


async def _post(app, path: str, payload):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post(path, json=payload)


@pytest.mark.asyncio
async def test_webhook_success(app_with_mock, mock_use_cases):
    response = await _post(app_with_mock, "/webhook/sheet-update", {"sync_id": "u1", "name": "Ann"})

    assert response.status_code == 200
    assert response.json() == {"status": "success"}
    mock_use_cases.ingest_sheet_update.assert_awaited_once_with({"sync_id": "u1", "name": "Ann"})
    mock_use_cases.apply_dashboard_update.assert_not_called()


@pytest.mark.asyncio
async def test_webhook_missing_sync_id_is_400(app_with_mock, mock_use_cases):
    mock_use_cases.ingest_sheet_update.side_effect = MissingSyncIdException()

    response = await _post(app_with_mock, "/webhook/sheet-update", {"name": "Ann"})

    assert response.status_code == 400
    assert response.json() == {"error": "sync_id is required"}


@pytest.mark.asyncio
async def test_webhook_invalid_column_is_400(app_with_mock, mock_use_cases):
    mock_use_cases.ingest_sheet_update.side_effect = InvalidColumnNameException("", "empty name")

    response = await _post(app_with_mock, "/webhook/sheet-update", {"sync_id": "u1", "": "x"})

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [SchemaSyncException("users", "boom", column="x"), RecordUpsertException("users", "u1", "boom"), RuntimeError("x")],
)
async def test_webhook_database_errors_are_500(app_with_mock, mock_use_cases, error):
    mock_use_cases.ingest_sheet_update.side_effect = error

    response = await _post(app_with_mock, "/webhook/sheet-update", {"sync_id": "u1"})

    assert response.status_code == 500
    assert response.json() == {"status": "error"}


@pytest.mark.asyncio
async def test_update_user_success(app_with_mock, mock_use_cases):
    response = await _post(app_with_mock, "/api/update-user", {"sync_id": "u1", "score": 3})

    assert response.status_code == 200
    assert response.json() == {"message": "Dynamic update successful", "outcome": "updated"}
    mock_use_cases.ingest_sheet_update.assert_not_called()


@pytest.mark.asyncio
async def test_update_user_missing_sync_id_is_400(app_with_mock, mock_use_cases):
    mock_use_cases.apply_dashboard_update.side_effect = MissingSyncIdException()

    response = await _post(app_with_mock, "/api/update-user", {"name": "Ann"})

    assert response.status_code == 400
    assert response.json() == {"message": "sync_id is required"}


@pytest.mark.asyncio
async def test_update_user_not_found_is_404(app_with_mock, mock_use_cases):
    mock_use_cases.apply_dashboard_update.side_effect = RecordNotFoundException("users", "missing")

    response = await _post(app_with_mock, "/api/update-user", {"sync_id": "missing"})

    assert response.status_code == 404
    assert response.json() == {"message": "Not found"}


@pytest.mark.asyncio
async def test_update_user_database_error_is_500(app_with_mock, mock_use_cases):
    mock_use_cases.apply_dashboard_update.side_effect = RecordUpsertException("users", "u1", "boom")

    response = await _post(app_with_mock, "/api/update-user", {"sync_id": "u1"})

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


@pytest.mark.asyncio
async def test_non_object_body_is_rejected(app_with_mock, mock_use_cases):
    response = await _post(app_with_mock, "/api/update-user", ["sync_id", "u1"])

    assert response.status_code == 422
    mock_use_cases.apply_dashboard_update.assert_not_called()
