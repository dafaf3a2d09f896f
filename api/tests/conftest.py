"""
Configuracion de fixtures para pytest.
"""
import os

# Antes de importar usersync: la configuracion se lee al importar
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest_usersync.db")
os.environ.setdefault("SHEET_SYNC_ENABLED", "false")

from typing import Any, AsyncGenerator, List, Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

from usersync.application.services.schema_reconciler import SchemaReconciler
from usersync.infrastructure.database.session import Base
from usersync.infrastructure.database.models import UserModel  # noqa: F401
from usersync.infrastructure.repositories.table_schema_repository import TableSchemaRepository


SYSTEM_COLUMNS = ["id", "updated_at"]


class FakeSheetsClient:
    """
    Hoja en memoria con la misma interfaz que GoogleSheetsClient.
    Solo entiende los rangos que usa el SheetWriter: 1:1, A:A y A<n>.
    """

    def __init__(self, grid: List[List[Any]], fail_on: Optional[str] = None):
        self.grid = [list(row) for row in grid]
        self.reads: List[str] = []
        self.updates: List[tuple] = []
        self.fail_on = fail_on

    def _notation(self, range_a1: str) -> str:
        return range_a1.split("!", 1)[1]

    async def get_values(self, range_a1: str) -> List[List[Any]]:
        self.reads.append(range_a1)
        if self.fail_on == "read":
            raise RuntimeError("quota exceeded")
        notation = self._notation(range_a1)
        if notation == "1:1":
            return [list(self.grid[0])] if self.grid and self.grid[0] else []
        if notation == "A:A":
            return [[row[0]] if row and row[0] != "" else [] for row in self.grid]
        raise AssertionError(f"Rango no soportado: {range_a1}")

    async def update_values(self, range_a1: str, values: List[List[Any]], value_input_option: str = "USER_ENTERED"):
        if self.fail_on == "write":
            raise RuntimeError("permission denied")
        self.updates.append((range_a1, values, value_input_option))
        row_index = int(self._notation(range_a1)[1:])
        while len(self.grid) < row_index:
            self.grid.append([])
        self.grid[row_index - 1] = list(values[0])
        return range_a1


@pytest.fixture(scope="function")
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine SQLite en archivo temporal con la tabla base creada.
    Un archivo (y no :memory:) para que varias conexiones vean el mismo esquema.
    """
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'usersync.db'}", echo=False)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Sesion de base de datos sobre el engine de prueba."""
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def reconciler(engine: AsyncEngine) -> SchemaReconciler:
    return SchemaReconciler(TableSchemaRepository(engine), SYSTEM_COLUMNS)


@pytest.fixture
def make_sheet():
    """Factory de hojas en memoria: make_sheet(grid, fail_on=None)."""
    return FakeSheetsClient
