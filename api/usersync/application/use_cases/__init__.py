"""
Casos de uso de la aplicacion.
"""
from usersync.application.use_cases.user_sync_use_cases import UserSyncUseCases

__all__ = ["UserSyncUseCases"]
