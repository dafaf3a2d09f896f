"""
Dependencias para inyeccion de servicios de sincronizacion.

El reconciliador de esquema y el cliente de Google Sheets son singletons de
proceso: la cache de columnas y los locks por tabla deben compartirse entre
requests.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from usersync.application.services.schema_reconciler import SchemaReconciler
from usersync.application.services.sheet_writer import SheetWriter
from usersync.application.use_cases.user_sync_use_cases import UserSyncUseCases
from usersync.core.config import settings
from usersync.infrastructure.database.session import engine, get_db
from usersync.infrastructure.external.google_sheets.sheets_client import GoogleSheetsClient
from usersync.infrastructure.repositories.table_schema_repository import TableSchemaRepository


@lru_cache(maxsize=1)
def get_schema_reconciler() -> SchemaReconciler:
    """
    Dependencia para obtener el reconciliador de esquema del proceso.

    Returns:
        SchemaReconciler: Instancia compartida
    """
    return SchemaReconciler(TableSchemaRepository(engine), settings.system_columns)


@lru_cache(maxsize=1)
def get_sheets_client() -> GoogleSheetsClient:
    """Cliente de Google Sheets del proceso (autenticacion perezosa)."""
    return GoogleSheetsClient(settings.SPREADSHEET_ID, settings.GOOGLE_SERVICE_ACCOUNT_FILE)


def get_sheet_writer() -> Optional[SheetWriter]:
    """
    Dependencia para obtener el escritor de la hoja.

    Returns:
        Optional[SheetWriter]: None si SHEET_SYNC_ENABLED=false
    """
    if not settings.SHEET_SYNC_ENABLED:
        return None
    return SheetWriter(
        get_sheets_client(),
        sheet_name=settings.SHEET_NAME,
        key_column=settings.SYNC_ID_COLUMN,
        system_columns=settings.system_columns,
    )


async def get_user_sync_use_cases(
    db: AsyncSession = Depends(get_db),
    reconciler: SchemaReconciler = Depends(get_schema_reconciler),
    sheet_writer: Optional[SheetWriter] = Depends(get_sheet_writer),
) -> UserSyncUseCases:
    """
    Dependencia para obtener los casos de uso de sincronizacion.

    Args:
        db: Sesion de base de datos
        reconciler: Reconciliador de esquema compartido
        sheet_writer: Escritor de la hoja (opcional)

    Returns:
        UserSyncUseCases: Instancia de casos de uso
    """
    return UserSyncUseCases(
        db,
        reconciler,
        sheet_writer,
        table_name=settings.SYNC_TABLE,
        key_column=settings.SYNC_ID_COLUMN,
        system_columns=settings.system_columns,
        touch_column=settings.UPDATED_AT_COLUMN or None,
        create_on_missing=settings.create_on_missing,
    )
