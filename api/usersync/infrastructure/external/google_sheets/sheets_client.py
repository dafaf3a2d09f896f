"""
Cliente minimo de Google Sheets API v4.

- Autenticacion con service account (scope de lectura/escritura de hojas)
- Lectura por rango A1 (grilla 2D de valores)
- Escritura por rango A1 con valueInputOption configurable

La libreria de Google es bloqueante: cada llamada se ejecuta en un thread
para no bloquear el event loop.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, List, Optional

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from loguru import logger

from usersync.shared.exceptions.infrastructure import SheetsConfigException, SheetsSyncException


SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Como si el usuario lo hubiera tipeado: Sheets aplica formato y tipos
USER_ENTERED = "USER_ENTERED"


def quote_sheet_name(sheet_name: str) -> str:
    """Nombre de hoja entre comillas simples, escapando comillas internas."""
    return "'" + sheet_name.replace("'", "''") + "'"


def a1_range(sheet_name: str, range_notation: str) -> str:
    """Construye 'Hoja'!A1 a partir del nombre de hoja y la notacion."""
    return f"{quote_sheet_name(sheet_name)}!{range_notation}"


class GoogleSheetsClient:
    """
    Cliente de una sola hoja de calculo.
    El servicio de Google se construye perezosamente en el primer uso.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_file: str,
        *,
        service: Any = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self.credentials_file = credentials_file
        self._service = service

    def _get_service(self):
        """Obtiene o crea el servicio de Sheets API."""
        if self._service is not None:
            return self._service

        if not self.spreadsheet_id:
            raise SheetsConfigException("Falta SPREADSHEET_ID en la configuracion")

        path = Path(self.credentials_file)
        if not path.exists():
            raise SheetsConfigException(
                f"No se encontro el archivo de service account: {path}"
            )

        creds = service_account.Credentials.from_service_account_file(str(path), scopes=SCOPES)
        # Sin cache de discovery en disco
        self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        logger.info(f"Cliente de Google Sheets inicializado para {self.spreadsheet_id}")
        return self._service

    def _get_values_sync(self, range_a1: str) -> List[List[Any]]:
        service = self._get_service()
        try:
            result = service.spreadsheets().values().get(
                spreadsheetId=self.spreadsheet_id,
                range=range_a1,
            ).execute()
        except (HttpError, GoogleAuthError) as e:
            raise SheetsSyncException(
                f"Error leyendo rango {range_a1}: {e}",
                details={"range": range_a1},
            ) from e
        return result.get("values", [])

    def _update_values_sync(
        self,
        range_a1: str,
        values: List[List[Any]],
        value_input_option: str,
    ) -> Optional[str]:
        service = self._get_service()
        try:
            result = service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=range_a1,
                valueInputOption=value_input_option,
                body={"values": values},
            ).execute()
        except (HttpError, GoogleAuthError) as e:
            raise SheetsSyncException(
                f"Error escribiendo rango {range_a1}: {e}",
                details={"range": range_a1},
            ) from e
        return result.get("updatedRange")

    async def get_values(self, range_a1: str) -> List[List[Any]]:
        """Lee un rango y retorna la grilla de valores (filas vacias como [])."""
        return await asyncio.to_thread(self._get_values_sync, range_a1)

    async def update_values(
        self,
        range_a1: str,
        values: List[List[Any]],
        value_input_option: str = USER_ENTERED,
    ) -> Optional[str]:
        """Sobrescribe un rango. Retorna el rango efectivamente actualizado."""
        return await asyncio.to_thread(self._update_values_sync, range_a1, values, value_input_option)
