"""
Router principal de la API.
Las rutas se montan en la raiz: los clientes existentes usan
/webhook/sheet-update y /api/update-user tal cual.
"""
from fastapi import APIRouter

from usersync.api.endpoints import diagnostics, sync


api_router = APIRouter()

api_router.include_router(sync.router)
api_router.include_router(diagnostics.router)
