"""
Excepciones relacionadas con la logica de dominio (errores del cliente).
"""
from typing import Any

from usersync.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepcion base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class ValidationException(DomainException):
    """Excepcion para errores de validacion."""

    def __init__(self, message: str, field: str = None, error_code: str = "VALIDATION_ERROR"):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class MissingSyncIdException(ValidationException):
    """El payload no trae el identificador de sincronizacion."""

    def __init__(self, field: str = "sync_id"):
        super().__init__(
            message=f"{field} is required",
            field=field,
            error_code="SYNC_ID_REQUIRED",
        )


class InvalidColumnNameException(ValidationException):
    """Una clave del payload no puede usarse como nombre de columna."""

    def __init__(self, column: Any, reason: str):
        super().__init__(
            message=f"Invalid column name {column!r}: {reason}",
            field=str(column),
            error_code="INVALID_COLUMN_NAME",
        )


class RecordNotFoundException(DomainException):
    """Excepcion cuando no existe un registro con el sync_id indicado."""

    def __init__(self, table_name: str, sync_id: Any):
        super().__init__(
            message="Not found",
            error_code="RECORD_NOT_FOUND",
            details={"table": table_name, "sync_id": str(sync_id)}
        )
        self.status_code = 404
