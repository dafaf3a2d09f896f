"""
Servicios de aplicacion.

Contiene la logica de sincronizacion reutilizable por los casos de uso:
reconciliacion de esquema, upsert de registros y escritura en la hoja.
"""
from usersync.application.services.schema_reconciler import SchemaReconciler
from usersync.application.services.record_upsert import (
    RecordUpsertEngine,
    UpsertMode,
    UpsertOutcome,
)
from usersync.application.services.sheet_writer import (
    SheetWriter,
    build_row_values,
    find_row_index,
)

__all__ = [
    # Esquema
    "SchemaReconciler",
    # Base de datos
    "RecordUpsertEngine",
    "UpsertMode",
    "UpsertOutcome",
    # Hoja de calculo
    "SheetWriter",
    "build_row_values",
    "find_row_index",
]
