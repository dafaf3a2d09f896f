"""
Endpoints de diagnostico de la base de datos.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from usersync.api.dependencies.sync_deps import get_schema_reconciler
from usersync.application.dto.sync_dto import DbTestResponseDTO, TableSchemaResponseDTO
from usersync.application.services.schema_reconciler import SchemaReconciler
from usersync.core.config import settings
from usersync.infrastructure.database.session import get_db


router = APIRouter(tags=["Diagnostics"])


@router.get("/test-db", response_model=DbTestResponseDTO, summary="Probar conectividad")
async def test_db(db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(text("SELECT 1 + 1 AS solution"))
        rows = [dict(row) for row in result.mappings().all()]
    except Exception as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": str(e)}
        )
    return DbTestResponseDTO(status="success", test_result=rows)


@router.get("/test-db-schema", response_model=TableSchemaResponseDTO, summary="Columnas de la tabla")
async def test_db_schema(reconciler: SchemaReconciler = Depends(get_schema_reconciler)):
    """Retorna las columnas actuales de la tabla sincronizada."""
    try:
        columns = await reconciler.get_columns(settings.SYNC_TABLE)
    except Exception as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)}
        )
    return TableSchemaResponseDTO(columns=columns)
