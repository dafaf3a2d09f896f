"""
Modelos de base de datos (ORM).

Solo se declaran las columnas gestionadas por el sistema. El resto de las
columnas de 'users' se agregan en caliente como TEXT a medida que llegan
claves nuevas desde la hoja o el dashboard.
"""
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func

from usersync.core.config import settings
from usersync.infrastructure.database.session import Base


class UserModel(Base):
    """Modelo base de la tabla sincronizada con la hoja de calculo."""

    __tablename__ = settings.SYNC_TABLE

    id = Column(Integer, primary_key=True, autoincrement=True)
    sync_id = Column(settings.SYNC_ID_COLUMN, String(255), nullable=False, unique=True, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )

    def __repr__(self):
        return f"<User(id={self.id}, sync_id={self.sync_id})>"
