"""
Repositorio de registros para una tabla de esquema dinamico.

La tabla se refleja en cada operacion porque sus columnas cambian en
caliente. Todas las sentencias se construyen con SQLAlchemy Core y los
valores viajan siempre como parametros.
"""
from typing import Any, Dict, Optional

from sqlalchemy import MetaData, Table, func, select, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from usersync.infrastructure.repositories.table_schema_repository import CASE_INSENSITIVE_DIALECTS


class DynamicRecordRepository:
    """
    Operaciones de lectura y escritura por clave de sincronizacion.
    El caller controla los commits.
    """

    def __init__(self, db: AsyncSession, touch_column: Optional[str] = None):
        self.db = db
        # Columna de "ultima modificacion" que se refresca en cada UPDATE
        self.touch_column = touch_column

    @property
    def dialect_name(self) -> str:
        return self.db.get_bind().dialect.name

    async def reflect_table(self, table_name: str) -> Table:
        """Refleja la definicion actual de la tabla."""
        def _reflect(sync_session) -> Table:
            return Table(table_name, MetaData(), autoload_with=sync_session.connection())

        return await self.db.run_sync(_reflect)

    def match_columns(self, table: Table, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        En dialectos sin distincion de mayusculas, renombra cada clave al
        nombre real de la columna (Name -> name).
        """
        if self.dialect_name not in CASE_INSENSITIVE_DIALECTS:
            return values
        by_folded = {column.name.lower(): column.name for column in table.columns}
        return {
            (key if key in table.c else by_folded.get(key.lower(), key)): value
            for key, value in values.items()
        }

    async def exists(self, table: Table, key_column: str, key: str) -> bool:
        query = select(table.c[key_column]).where(table.c[key_column] == key).limit(1)
        result = await self.db.execute(query)
        return result.first() is not None

    async def get_by_key(self, table: Table, key_column: str, key: str) -> Optional[Dict[str, Any]]:
        """Retorna la fila completa como dict o None si no existe."""
        query = select(table).where(table.c[key_column] == key).limit(1)
        result = await self.db.execute(query)
        row = result.mappings().first()
        return dict(row) if row else None

    async def insert_or_merge(self, table: Table, key_column: str, values: Dict[str, Any]) -> None:
        """
        INSERT con resolucion de conflicto sobre la clave unica.

        En conflicto solo se sobrescriben las columnas presentes en values;
        el resto de la fila queda intacta.
        """
        update_cols = [c for c in values if c != key_column]

        if self.dialect_name == "mysql":
            stmt = mysql.insert(table).values(values)
            set_map = {c: stmt.inserted[c] for c in update_cols} or {key_column: stmt.inserted[key_column]}
            set_map.update(self._touch(table))
            stmt = stmt.on_duplicate_key_update(set_map)
        else:
            dialect_module = postgresql if self.dialect_name == "postgresql" else sqlite
            stmt = dialect_module.insert(table).values(values)
            if update_cols:
                set_map = {c: stmt.excluded[c] for c in update_cols}
                set_map.update(self._touch(table))
                stmt = stmt.on_conflict_do_update(index_elements=[table.c[key_column]], set_=set_map)
            else:
                stmt = stmt.on_conflict_do_nothing(index_elements=[table.c[key_column]])

        await self.db.execute(stmt)

    async def update_by_key(self, table: Table, key_column: str, key: str, values: Dict[str, Any]) -> int:
        """
        UPDATE ... WHERE key_column = key.

        Returns:
            int: filas que coincidieron con la clave
        """
        set_map = {c: v for c, v in values.items() if c != key_column}
        set_map.update(self._touch(table))
        if not set_map:
            return 1 if await self.exists(table, key_column, key) else 0

        stmt = update(table).where(table.c[key_column] == key).values(set_map)
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    def _touch(self, table: Table) -> Dict[str, Any]:
        if self.touch_column and self.touch_column in table.c:
            return {self.touch_column: func.now()}
        return {}
