"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .sync_dto import (
    SheetUpdateResponseDTO,
    DashboardUpdateResponseDTO,
    TableSchemaResponseDTO,
    DbTestResponseDTO,
)

__all__ = [
    "SheetUpdateResponseDTO",
    "DashboardUpdateResponseDTO",
    "TableSchemaResponseDTO",
    "DbTestResponseDTO",
]
