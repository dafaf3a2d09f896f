"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    - DATABASE_URL se puede especificar completa o por componentes
    - SPREADSHEET_ID es obligatorio para reflejar cambios en la hoja
    - DASHBOARD_MISSING_RECORD_POLICY decide que pasa cuando el dashboard
      actualiza un sync_id inexistente: 'create' (lo inserta) o
      'not_found' (responde 404)
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Users Sheet Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)

    # Base de datos - Componentes separados (recomendado para flexibilidad)
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="sync_user")
    DATABASE_PASSWORD: str = Field(default="sync_pass")
    DATABASE_NAME: str = Field(default="sync_db")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    # Limite de conexiones concurrentes contra la base de datos
    DB_POOL_SIZE: int = Field(default=15)
    DB_MAX_OVERFLOW: int = Field(default=0)

    # Sincronizacion
    SYNC_TABLE: str = Field(default="users")
    SYNC_ID_COLUMN: str = Field(default="sync_id")
    # Columnas gestionadas por la base de datos (nunca se crean ni se sobrescriben)
    SYSTEM_COLUMNS: str = Field(default="id,updated_at")
    # Columna de ultima modificacion que se refresca en cada UPDATE (vacio = ninguna)
    UPDATED_AT_COLUMN: str = Field(default="updated_at")
    DASHBOARD_MISSING_RECORD_POLICY: str = Field(default="create")

    # Google Sheets
    SPREADSHEET_ID: str = Field(default="")
    SHEET_NAME: str = Field(default="Sheet1")
    GOOGLE_SERVICE_ACCOUNT_FILE: str = Field(default="./service-account.json")
    SHEET_SYNC_ENABLED: bool = Field(default=True)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def system_columns(self) -> List[str]:
        """Lista de columnas de sistema, sin espacios ni vacios."""
        return [c.strip() for c in self.SYSTEM_COLUMNS.split(",") if c.strip()]

    @computed_field
    @property
    def create_on_missing(self) -> bool:
        """Indica si el dashboard crea el registro cuando no existe."""
        return self.DASHBOARD_MISSING_RECORD_POLICY.strip().lower() != "not_found"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
