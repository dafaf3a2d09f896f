"""
Script para crear la tabla base de sincronizacion y mostrar sus columnas.
"""
import asyncio
from loguru import logger

from usersync.core.config import settings
from usersync.infrastructure.database.session import close_db, engine, init_db
from usersync.infrastructure.repositories.table_schema_repository import TableSchemaRepository


async def main():
    """Funcion principal para inicializar la base de datos."""
    logger.info("Inicializando base de datos...")

    try:
        await init_db()
        columns = await TableSchemaRepository(engine).get_columns(settings.SYNC_TABLE)
        logger.success(f"Tabla '{settings.SYNC_TABLE}' lista. Columnas: {', '.join(columns)}")
    except Exception as e:
        logger.error(f"Error al inicializar base de datos: {e}")
        raise
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
