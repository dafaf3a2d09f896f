"""
Repositorio de esquema para la tabla sincronizada.

Lee el conjunto de columnas con el inspector de SQLAlchemy (equivalente
portable de SHOW COLUMNS) y agrega columnas TEXT con las operaciones de
Alembic, de modo que el nombre de columna siempre pasa por el quoting del
dialecto y nunca se interpola crudo en el SQL.
"""
from typing import List

import sqlalchemy as sa
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine


# Dialectos donde los nombres de columna se comparan sin distinguir mayusculas
CASE_INSENSITIVE_DIALECTS = frozenset({"mysql", "mariadb", "sqlite"})


def add_text_column_op(operations: Operations, table_name: str, column_name: str) -> None:
    """
    Emite ALTER TABLE ... ADD COLUMN <column_name> TEXT.
    En PostgreSQL se agrega IF NOT EXISTS.
    """
    column = sa.Column(column_name, sa.Text(), nullable=True)
    if operations.migration_context.dialect.name == "postgresql":
        operations.add_column(table_name, column, if_not_exists=True)
    else:
        operations.add_column(table_name, column)


class TableSchemaRepository:
    """
    Acceso al esquema de una tabla.
    Cada ALTER se ejecuta en su propia transaccion confirmada.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @property
    def case_insensitive_columns(self) -> bool:
        return self.dialect_name in CASE_INSENSITIVE_DIALECTS

    @property
    def max_identifier_length(self) -> int:
        return self.engine.dialect.max_identifier_length

    async def get_columns(self, table_name: str) -> List[str]:
        """
        Retorna los nombres de columna en el orden de la tabla.

        Raises:
            sqlalchemy.exc.NoSuchTableError: si la tabla no existe
        """
        def _columns(sync_conn) -> List[str]:
            columns = [col["name"] for col in sa.inspect(sync_conn).get_columns(table_name)]
            if not columns:
                raise sa.exc.NoSuchTableError(table_name)
            return columns

        async with self.engine.connect() as conn:
            return await conn.run_sync(_columns)

    async def add_text_column(self, table_name: str, column_name: str) -> None:
        """Ejecuta ALTER TABLE ... ADD COLUMN <column_name> TEXT."""
        def _add(sync_conn) -> None:
            add_text_column_op(Operations(MigrationContext.configure(sync_conn)), table_name, column_name)

        async with self.engine.begin() as conn:
            await conn.run_sync(_add)
        logger.info(f"Columna '{column_name}' agregada a '{table_name}'")
