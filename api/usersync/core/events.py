"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable
from fastapi import FastAPI
from loguru import logger

from usersync.core.config import settings
from usersync.infrastructure.database.session import init_db, close_db


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            # Validar configuracion critica
            _validate_config()

            # Crea la tabla base de sincronizacion si no existe
            await init_db()
            logger.info(f"Tabla '{settings.SYNC_TABLE}' verificada")

            logger.success(f"Estado del servidor: Online | Puerto: {settings.PORT}")

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []

    if settings.SHEET_SYNC_ENABLED:
        if not settings.SPREADSHEET_ID:
            warnings.append("SPREADSHEET_ID no configurado - no se reflejaran cambios en la hoja")
        if not Path(settings.GOOGLE_SERVICE_ACCOUNT_FILE).exists():
            warnings.append(
                f"No existe {settings.GOOGLE_SERVICE_ACCOUNT_FILE} - la hoja no se podra actualizar"
            )

    if settings.SYNC_ID_COLUMN in settings.system_columns:
        warnings.append(f"{settings.SYNC_ID_COLUMN} figura en SYSTEM_COLUMNS y sera ignorada")

    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        # Cerrar conexiones de base de datos
        await close_db()
        logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Ciclo de vida de la aplicacion: inicio antes del yield, cierre despues.

    Args:
        app: Instancia de FastAPI
    """
    await startup_handler(app)()
    try:
        yield
    finally:
        await shutdown_handler(app)()
