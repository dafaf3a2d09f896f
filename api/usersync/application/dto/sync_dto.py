"""
DTOs de respuesta de los endpoints de sincronizacion.

Los payloads de entrada no tienen DTO: son mapas planos columna -> valor
cuyo conjunto de claves es dinamico.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SheetUpdateResponseDTO(BaseModel):
    """Respuesta del webhook de la hoja."""

    status: str = Field(default="success")


class DashboardUpdateResponseDTO(BaseModel):
    """Respuesta de una actualizacion desde el dashboard."""

    message: str = Field(default="Dynamic update successful")
    outcome: Optional[str] = Field(None, description="created | updated | not_found_and_created")


class TableSchemaResponseDTO(BaseModel):
    """Columnas actuales de la tabla sincronizada."""

    columns: List[str]


class DbTestResponseDTO(BaseModel):
    """Resultado de la prueba de conectividad."""

    status: str
    test_result: List[Dict[str, Any]]
