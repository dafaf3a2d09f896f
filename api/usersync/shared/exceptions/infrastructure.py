"""
Excepciones de infraestructura: base de datos y Google Sheets.
Siempre se traducen a errores 500 cuando llegan al cliente.
"""
from usersync.shared.exceptions.base import AppException


class InfrastructureException(AppException):
    """Excepcion base para fallos de sistemas externos."""

    def __init__(self, message: str, error_code: str = "INFRASTRUCTURE_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=500,
            error_code=error_code,
            details=details
        )


class SchemaSyncException(InfrastructureException):
    """Fallo al alterar el esquema de la tabla (ALTER TABLE)."""

    def __init__(self, table_name: str, cause: str, column: str = None):
        target = f"la columna '{column}' a " if column else "el esquema de "
        super().__init__(
            message=f"No se pudo sincronizar {target}'{table_name}': {cause}",
            error_code="SCHEMA_SYNC_FAILED",
            details={"table": table_name, "column": column}
        )


class RecordUpsertException(InfrastructureException):
    """Fallo al insertar o actualizar un registro."""

    def __init__(self, table_name: str, sync_id: str, cause: str):
        super().__init__(
            message=f"No se pudo persistir sync_id={sync_id} en '{table_name}': {cause}",
            error_code="RECORD_UPSERT_FAILED",
            details={"table": table_name, "sync_id": sync_id}
        )


class SheetsConfigException(InfrastructureException):
    """Falta configuracion de Google Sheets (spreadsheet o credenciales)."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="SHEETS_CONFIG_MISSING")


class SheetsSyncException(InfrastructureException):
    """Error al leer o escribir la hoja de calculo."""

    def __init__(self, message: str, details=None):
        super().__init__(message=message, error_code="SHEETS_SYNC_FAILED", details=details)
