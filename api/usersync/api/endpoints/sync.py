"""
Endpoints de sincronizacion entre la tabla de usuarios y la hoja.

Cada endpoint conserva su propio formato de respuesta de error, porque
los clientes (Apps Script de la hoja y el dashboard) ya dependen de el.
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from loguru import logger

from usersync.api.dependencies.sync_deps import get_user_sync_use_cases
from usersync.application.dto.sync_dto import DashboardUpdateResponseDTO, SheetUpdateResponseDTO
from usersync.application.use_cases.user_sync_use_cases import UserSyncUseCases
from usersync.shared.exceptions.domain import DomainException


router = APIRouter(tags=["Sync"])


@router.post(
    "/webhook/sheet-update",
    response_model=SheetUpdateResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Aplicar en la base un cambio de la hoja"
)
async def sheet_update_webhook(
    payload: Dict[str, Any] = Body(...),
    use_cases: UserSyncUseCases = Depends(get_user_sync_use_cases)
):
    """
    Webhook dinamico hoja -> base.

    - Crea columnas nuevas si la hoja trae claves desconocidas
    - Hace UPSERT por sync_id
    - No escribe de vuelta en la hoja
    """
    try:
        await use_cases.ingest_sheet_update(payload)
    except DomainException as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.error(f"Error: fallo el webhook de sincronizacion: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error"}
        )

    return SheetUpdateResponseDTO(status="success")


@router.post(
    "/api/update-user",
    response_model=DashboardUpdateResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Actualizar un usuario desde el dashboard"
)
async def update_user(
    payload: Dict[str, Any] = Body(...),
    use_cases: UserSyncUseCases = Depends(get_user_sync_use_cases)
):
    """
    Actualizacion dinamica dashboard -> base -> hoja.

    La respuesta refleja solo el resultado de la base; la escritura en la
    hoja es best-effort.
    """
    try:
        outcome = await use_cases.apply_dashboard_update(payload)
    except DomainException as e:
        return JSONResponse(status_code=e.status_code, content={"message": e.message})
    except Exception as e:
        logger.error(f"Error: fallo la actualizacion desde el dashboard: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"}
        )

    return DashboardUpdateResponseDTO(outcome=outcome.value)
