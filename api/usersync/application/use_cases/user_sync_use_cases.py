"""
Casos de uso de sincronizacion de usuarios.

- Webhook (hoja -> base): reconciliar esquema -> upsert MERGE.
- Dashboard (dashboard -> base -> hoja): reconciliar esquema -> upsert
  UPDATE_OR_CREATE / UPDATE_ONLY -> commit -> reflejar en la hoja.

La base es la fuente de verdad: sus errores se propagan al caller,
los de la hoja solo se registran.
"""
from typing import Any, Dict, Iterable, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from usersync.application.services.record_upsert import RecordUpsertEngine, UpsertMode, UpsertOutcome
from usersync.application.services.schema_reconciler import SchemaReconciler
from usersync.application.services.sheet_writer import SheetWriter
from usersync.infrastructure.repositories.dynamic_record_repository import DynamicRecordRepository
from usersync.shared.exceptions.base import AppException
from usersync.shared.exceptions.domain import MissingSyncIdException, RecordNotFoundException
from usersync.shared.utils.value_utils import to_text


class UserSyncUseCases:
    """
    Orquestador de los dos flujos de sincronizacion.
    Una instancia por request (comparte la sesion de base de datos).
    """

    def __init__(
        self,
        db: AsyncSession,
        reconciler: SchemaReconciler,
        sheet_writer: Optional[SheetWriter] = None,
        *,
        table_name: str = "users",
        key_column: str = "sync_id",
        system_columns: Iterable[str] = ("id", "updated_at"),
        touch_column: Optional[str] = "updated_at",
        create_on_missing: bool = True,
    ):
        self.db = db
        self.reconciler = reconciler
        self.sheet_writer = sheet_writer
        self.table_name = table_name
        self.key_column = key_column
        self.create_on_missing = create_on_missing
        self.upsert_engine = RecordUpsertEngine(
            DynamicRecordRepository(db, touch_column=touch_column),
            key_column=key_column,
            system_columns=system_columns,
        )

    def _require_sync_id(self, payload: Dict[str, Any]) -> str:
        sync_id = to_text(payload.get(self.key_column))
        if not sync_id:
            raise MissingSyncIdException(self.key_column)
        return sync_id

    async def _persist(self, payload: Dict[str, Any], mode: UpsertMode) -> UpsertOutcome:
        await self.reconciler.reconcile(self.table_name, payload.keys())
        try:
            outcome = await self.upsert_engine.upsert(self.table_name, payload, mode)
        except AppException:
            await self.db.rollback()
            raise
        return outcome

    async def ingest_sheet_update(self, payload: Dict[str, Any]) -> UpsertOutcome:
        """
        Aplica en la base un cambio originado en la hoja.
        No escribe en la hoja: este flujo termina en la base.
        """
        sync_id = self._require_sync_id(payload)

        outcome = await self._persist(payload, UpsertMode.MERGE)
        await self.db.commit()

        logger.info(f"Sincronizacion dinamica completa para ID {sync_id} ({outcome.value})")
        return outcome

    async def apply_dashboard_update(self, payload: Dict[str, Any]) -> UpsertOutcome:
        """
        Aplica en la base un cambio del dashboard y lo refleja en la hoja.

        Raises:
            MissingSyncIdException: payload sin sync_id
            RecordNotFoundException: sync_id inexistente con politica 'not_found'
        """
        sync_id = self._require_sync_id(payload)
        mode = UpsertMode.UPDATE_OR_CREATE if self.create_on_missing else UpsertMode.UPDATE_ONLY

        outcome = await self._persist(payload, mode)
        if outcome is UpsertOutcome.NOT_FOUND:
            await self.db.rollback()
            raise RecordNotFoundException(self.table_name, sync_id)

        # La hoja debe leer el estado ya confirmado
        await self.db.commit()

        if self.sheet_writer is not None:
            await self.sheet_writer.sync_record_to_sheet(sync_id, self.load_record)

        return outcome

    async def load_record(self, sync_id: str) -> Optional[Dict[str, Any]]:
        """
        Lee el registro persistido y cierra la transaccion de lectura, para
        no retener locks sobre la tabla durante la escritura en la hoja.
        """
        record = await self.upsert_engine.fetch(self.table_name, sync_id)
        await self.db.commit()
        return record
