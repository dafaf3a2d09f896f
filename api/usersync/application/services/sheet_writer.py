"""
Escritura de un registro en la hoja, alineado al orden del header.

La hoja es un espejo best-effort de la base: nunca se agregan filas y
cualquier fallo se registra en el log sin propagarse al caller.
"""
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from loguru import logger

from usersync.infrastructure.external.google_sheets.sheets_client import USER_ENTERED, a1_range
from usersync.shared.utils.value_utils import strip_columns, to_cell


RecordLoader = Callable[[str], Awaitable[Optional[Dict[str, Any]]]]


def build_row_values(headers: List[str], record: Dict[str, Any]) -> List[str]:
    """
    Vector de valores con el mismo largo y orden que el header.
    Los campos ausentes o NULL se escriben como cadena vacia.
    """
    return [to_cell(record.get(header)) for header in headers]


def find_row_index(id_column: List[List[Any]], sync_id: str) -> Optional[int]:
    """
    Busca la primera fila (1-based) cuya columna A coincide con sync_id.
    La fila 1 es el header y no se considera.
    """
    for index, row in enumerate(id_column, start=1):
        if index == 1:
            continue
        if row and to_cell(row[0]) == sync_id:
            return index
    return None


class SheetWriter:
    """Sincroniza registros de la base hacia una hoja de Google Sheets."""

    def __init__(
        self,
        sheets_client,
        sheet_name: str = "Sheet1",
        key_column: str = "sync_id",
        system_columns: Iterable[str] = (),
    ):
        self.sheets_client = sheets_client
        self.sheet_name = sheet_name
        self.key_column = key_column
        self.system_columns = frozenset(system_columns)

    async def read_headers(self) -> List[str]:
        rows = await self.sheets_client.get_values(a1_range(self.sheet_name, "1:1"))
        return [str(h) for h in rows[0]] if rows else []

    async def push_record(self, record: Dict[str, Any]) -> Optional[int]:
        """
        Sobrescribe la fila del registro con sus valores alineados al header.

        Returns:
            Optional[int]: fila escrita, o None si no hay fila para el sync_id

        Raises:
            Cualquier error del cliente de Sheets.
        """
        sync_id = to_cell(record.get(self.key_column))
        projected = strip_columns(record, self.system_columns)

        headers = await self.read_headers()
        if not headers:
            logger.warning(f"La hoja '{self.sheet_name}' no tiene header. Nada que sincronizar.")
            return None

        id_column = await self.sheets_client.get_values(a1_range(self.sheet_name, "A:A"))
        row_index = find_row_index(id_column, sync_id)
        if row_index is None:
            logger.info(f"sync_id {sync_id} no tiene fila en la hoja '{self.sheet_name}'. Se omite.")
            return None

        values = build_row_values(headers, projected)
        await self.sheets_client.update_values(
            a1_range(self.sheet_name, f"A{row_index}"),
            [values],
            USER_ENTERED,
        )
        return row_index

    async def sync_record_to_sheet(self, sync_id: str, load_record: RecordLoader) -> Optional[int]:
        """
        Relee el registro persistido y lo refleja en la hoja.
        Nunca lanza excepciones: los fallos quedan en el log.
        """
        logger.info(f"Iniciando sincronizacion con la hoja para ID {sync_id}")
        try:
            record = await load_record(sync_id)
            if record is None:
                logger.warning(f"sync_id {sync_id} no existe en la base. No se sincroniza la hoja.")
                return None

            row_index = await self.push_record(record)
            if row_index is not None:
                logger.info(f"Hoja sincronizada para ID {sync_id} (fila {row_index})")
            return row_index
        except Exception as e:
            logger.error(f"Fallo la sincronizacion con la hoja para ID {sync_id}: {e}")
            return None
