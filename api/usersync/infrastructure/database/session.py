"""
Gestion del engine y las sesiones de base de datos.

El engine es un singleton de proceso con un pool de conexiones acotado
(DB_POOL_SIZE + DB_MAX_OVERFLOW) para no agotar conexiones bajo carga.
"""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base

from usersync.core.config import settings


# Base para modelos de SQLAlchemy
Base = declarative_base()


def _create_engine_args(database_url: str) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    PostgreSQL y MySQL usan pool acotado, SQLite usa el pool por defecto.
    """
    args = {
        "echo": settings.DEBUG,
        "future": True,
    }

    if not database_url.startswith("sqlite"):
        args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


def create_engine_from_url(database_url: str) -> AsyncEngine:
    """Crea un engine asincrono con la configuracion de pool correspondiente."""
    return create_async_engine(database_url, **_create_engine_args(database_url))


# Engine de base de datos
engine = create_engine_from_url(settings.effective_database_url)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Generador de sesiones de base de datos.
    Para usar como dependencia en FastAPI.

    Yields:
        AsyncSession: Sesion de base de datos
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Crea la tabla base de sincronizacion si no existe."""
    # Registrar modelos en Base.metadata
    from usersync.infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Cierra las conexiones de la base de datos."""
    await engine.dispose()
