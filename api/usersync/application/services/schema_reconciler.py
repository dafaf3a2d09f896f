"""
Reconciliacion de esquema: asegura que la tabla tenga una columna por
cada clave del payload.

Diseno:
- Cache en memoria de columnas conocidas por tabla, refrescada de forma
  perezosa (solo se consulta la base cuando aparece una clave desconocida).
- Las mutaciones se serializan por tabla con un asyncio.Lock.
- Si otro proceso agrego la misma columna, el ALTER falla pero la columna
  existe: se considera un resultado idempotente, no un error.
"""
import asyncio
from typing import Dict, Iterable, List, Set

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from usersync.infrastructure.repositories.table_schema_repository import TableSchemaRepository
from usersync.shared.exceptions.domain import InvalidColumnNameException
from usersync.shared.exceptions.infrastructure import SchemaSyncException


class SchemaReconciler:
    """
    Registro de columnas con operacion add-if-absent.
    Una instancia por proceso (ver dependencias del API).
    """

    def __init__(self, schema_repository: TableSchemaRepository, system_columns: Iterable[str] = ()):
        self.schema_repository = schema_repository
        self.system_columns = frozenset(system_columns)
        self._known_columns: Dict[str, Set[str]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, table_name: str) -> asyncio.Lock:
        lock = self._locks.get(table_name)
        if lock is None:
            lock = self._locks[table_name] = asyncio.Lock()
        return lock

    def validate_column_name(self, column: str) -> None:
        """
        Rechaza claves que no pueden ser identificadores SQL.

        Raises:
            InvalidColumnNameException
        """
        if not isinstance(column, str) or not column.strip():
            raise InvalidColumnNameException(column, "empty name")
        if "\x00" in column:
            raise InvalidColumnNameException(column, "contains NUL character")
        max_length = self.schema_repository.max_identifier_length
        if len(column.encode("utf-8")) > max_length:
            raise InvalidColumnNameException(column, f"longer than {max_length} bytes")

    def _fold(self, column: str) -> str:
        """Forma de comparacion del nombre segun el dialecto."""
        return column.lower() if self.schema_repository.case_insensitive_columns else column

    def invalidate(self, table_name: str) -> None:
        """Descarta la cache de columnas de una tabla."""
        self._known_columns.pop(table_name, None)

    async def get_columns(self, table_name: str) -> List[str]:
        """Columnas actuales de la tabla, leidas siempre desde la base."""
        return await self.schema_repository.get_columns(table_name)

    async def _refresh(self, table_name: str) -> Set[str]:
        try:
            columns = {self._fold(c) for c in await self.schema_repository.get_columns(table_name)}
        except SQLAlchemyError as e:
            self.invalidate(table_name)
            raise SchemaSyncException(table_name, str(e)) from e
        self._known_columns[table_name] = columns
        return columns

    async def reconcile(self, table_name: str, payload_keys: Iterable[str]) -> List[str]:
        """
        Agrega como TEXT cada clave que aun no sea columna.

        Las columnas de sistema se ignoran. Es idempotente: una segunda
        llamada con las mismas claves no modifica nada.

        Returns:
            List[str]: columnas agregadas por esta llamada

        Raises:
            InvalidColumnNameException: clave no utilizable como columna
            SchemaSyncException: fallo al leer o alterar el esquema
        """
        candidates: List[str] = []
        seen: Set[str] = set()
        for key in payload_keys:
            if key in self.system_columns:
                continue
            self.validate_column_name(key)
            if self._fold(key) in seen:
                continue
            seen.add(self._fold(key))
            candidates.append(key)

        known = self._known_columns.get(table_name)
        if known is not None and seen <= known:
            return []

        async with self._lock_for(table_name):
            existing = await self._refresh(table_name)
            added: List[str] = []

            for column in candidates:
                if self._fold(column) in existing:
                    continue

                logger.info(f"Nueva columna detectada: {column}. Migrando '{table_name}'...")
                try:
                    await self.schema_repository.add_text_column(table_name, column)
                except SQLAlchemyError as e:
                    existing = await self._refresh(table_name)
                    if self._fold(column) in existing:
                        logger.info(f"La columna '{column}' ya existia en '{table_name}'")
                        continue
                    self.invalidate(table_name)
                    logger.error(f"Error agregando columna '{column}' a '{table_name}': {e}")
                    raise SchemaSyncException(table_name, str(e), column=column) from e

                existing.add(self._fold(column))
                added.append(column)

            return added
