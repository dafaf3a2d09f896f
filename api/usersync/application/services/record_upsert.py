"""
Motor de upsert de registros por sync_id.

Un solo motor expone los tres modos que usan los endpoints:
- MERGE: INSERT ... ON CONFLICT/DUPLICATE KEY UPDATE (webhook de la hoja)
- UPDATE_OR_CREATE: UPDATE y, si no hubo filas, INSERT (dashboard)
- UPDATE_ONLY: UPDATE; si no hubo filas, NOT_FOUND (dashboard estricto)

Las columnas ausentes del payload nunca se tocan.
"""
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from usersync.infrastructure.repositories.dynamic_record_repository import DynamicRecordRepository
from usersync.shared.exceptions.domain import MissingSyncIdException
from usersync.shared.exceptions.infrastructure import RecordUpsertException
from usersync.shared.utils.value_utils import normalize_record, strip_columns, to_text


class UpsertMode(str, Enum):
    """Estrategia de escritura."""
    MERGE = "merge"
    UPDATE_OR_CREATE = "update_or_create"
    UPDATE_ONLY = "update_only"


class UpsertOutcome(str, Enum):
    """Resultado de un upsert."""
    CREATED = "created"
    UPDATED = "updated"
    NOT_FOUND_AND_CREATED = "not_found_and_created"
    NOT_FOUND = "not_found"


class RecordUpsertEngine:
    """
    Aplica un payload contra la tabla usando la clave de sincronizacion.
    No hace commit: la transaccion la controla el caso de uso.
    """

    def __init__(
        self,
        repository: DynamicRecordRepository,
        key_column: str = "sync_id",
        system_columns: Iterable[str] = (),
    ):
        self.repository = repository
        self.key_column = key_column
        self.system_columns = frozenset(system_columns)

    def prepare_values(self, record: Dict[str, Any]) -> Dict[str, Optional[str]]:
        """Quita columnas de sistema y normaliza los valores a texto."""
        return normalize_record(strip_columns(record, self.system_columns))

    async def upsert(self, table_name: str, record: Dict[str, Any], mode: UpsertMode) -> UpsertOutcome:
        """
        Inserta o actualiza el registro segun el modo.

        Raises:
            MissingSyncIdException: el registro no trae sync_id
            RecordUpsertException: error de base de datos
        """
        values = self.prepare_values(record)
        sync_id = values.get(self.key_column)
        if not sync_id:
            raise MissingSyncIdException(self.key_column)

        try:
            table = await self.repository.reflect_table(table_name)
            values = self.repository.match_columns(table, values)

            if mode is UpsertMode.MERGE:
                existed = await self.repository.exists(table, self.key_column, sync_id)
                await self.repository.insert_or_merge(table, self.key_column, values)
                outcome = UpsertOutcome.UPDATED if existed else UpsertOutcome.CREATED
            else:
                matched = await self.repository.update_by_key(table, self.key_column, sync_id, values)
                if matched:
                    outcome = UpsertOutcome.UPDATED
                elif mode is UpsertMode.UPDATE_ONLY:
                    outcome = UpsertOutcome.NOT_FOUND
                else:
                    # Un alta concurrente del mismo sync_id termina en merge
                    await self.repository.insert_or_merge(table, self.key_column, values)
                    outcome = UpsertOutcome.NOT_FOUND_AND_CREATED
        except (SQLAlchemyError, KeyError) as e:
            logger.error(f"Error en upsert de sync_id={sync_id} ({mode.value}): {e}")
            raise RecordUpsertException(table_name, sync_id, str(e)) from e

        logger.info(f"Upsert {mode.value} de sync_id={sync_id} en '{table_name}': {outcome.value}")
        return outcome

    async def fetch(self, table_name: str, sync_id: Any) -> Optional[Dict[str, Any]]:
        """Lee el registro persistido completo (incluye columnas de sistema)."""
        table = await self.repository.reflect_table(table_name)
        return await self.repository.get_by_key(table, self.key_column, to_text(sync_id))
