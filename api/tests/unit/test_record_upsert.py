"""
Tests unitarios para RecordUpsertEngine sobre SQLite.

Cubre los tres modos (MERGE, UPDATE_OR_CREATE, UPDATE_ONLY), la semantica
de actualizacion parcial y la proteccion de columnas de sistema.
"""
import pytest
from sqlalchemy import text

from usersync.application.services.record_upsert import RecordUpsertEngine, UpsertMode, UpsertOutcome
from usersync.infrastructure.repositories.dynamic_record_repository import DynamicRecordRepository
from usersync.shared.exceptions.domain import MissingSyncIdException
from usersync.shared.exceptions.infrastructure import RecordUpsertException


@pytest.fixture
async def upsert_engine(db_session, reconciler):
    await reconciler.reconcile("users", ["sync_id", "name", "score", "city"])
    return RecordUpsertEngine(
        DynamicRecordRepository(db_session, touch_column="updated_at"),
        key_column="sync_id",
        system_columns=["id", "updated_at"],
    )


async def _count(db_session, sync_id: str) -> int:
    result = await db_session.execute(text("SELECT COUNT(*) FROM users WHERE sync_id = :s"), {"s": sync_id})
    return result.scalar_one()


@pytest.mark.asyncio
async def test_merge_inserts_new_record(upsert_engine, db_session):
    outcome = await upsert_engine.upsert("users", {"sync_id": "u1", "name": "Ann", "score": 42}, UpsertMode.MERGE)
    await db_session.commit()

    assert outcome is UpsertOutcome.CREATED
    record = await upsert_engine.fetch("users", "u1")
    assert record["name"] == "Ann"
    assert record["score"] == "42"
    assert await _count(db_session, "u1") == 1


@pytest.mark.asyncio
async def test_merge_updates_only_present_columns(upsert_engine, db_session):
    await upsert_engine.upsert("users", {"sync_id": "u1", "name": "Ann", "city": "Lima"}, UpsertMode.MERGE)
    await db_session.commit()

    outcome = await upsert_engine.upsert("users", {"sync_id": "u1", "name": "Anna"}, UpsertMode.MERGE)
    await db_session.commit()

    assert outcome is UpsertOutcome.UPDATED
    record = await upsert_engine.fetch("users", "u1")
    assert record["name"] == "Anna"
    assert record["city"] == "Lima"
    assert await _count(db_session, "u1") == 1


@pytest.mark.asyncio
async def test_merge_with_only_sync_id_keeps_existing_row(upsert_engine, db_session):
    await upsert_engine.upsert("users", {"sync_id": "u1", "name": "Ann"}, UpsertMode.MERGE)
    await db_session.commit()

    outcome = await upsert_engine.upsert("users", {"sync_id": "u1"}, UpsertMode.MERGE)

    assert outcome is UpsertOutcome.UPDATED
    assert (await upsert_engine.fetch("users", "u1"))["name"] == "Ann"


@pytest.mark.asyncio
async def test_system_columns_in_payload_are_ignored(upsert_engine, db_session):
    await upsert_engine.upsert("users", {"sync_id": "u1", "name": "Ann"}, UpsertMode.MERGE)
    await db_session.commit()
    original_id = (await upsert_engine.fetch("users", "u1"))["id"]

    await upsert_engine.upsert(
        "users",
        {"sync_id": "u1", "id": original_id + 100, "updated_at": "1999-01-01", "name": "Bo"},
        UpsertMode.UPDATE_OR_CREATE,
    )
    await db_session.commit()

    record = await upsert_engine.fetch("users", "u1")
    assert record["id"] == original_id
    assert record["name"] == "Bo"


@pytest.mark.asyncio
async def test_update_or_create_updates_existing(upsert_engine, db_session):
    await upsert_engine.upsert("users", {"sync_id": "u1", "name": "Ann", "city": "Lima"}, UpsertMode.MERGE)
    await db_session.commit()

    outcome = await upsert_engine.upsert("users", {"sync_id": "u1", "score": 7}, UpsertMode.UPDATE_OR_CREATE)

    assert outcome is UpsertOutcome.UPDATED
    record = await upsert_engine.fetch("users", "u1")
    assert record["score"] == "7"
    assert record["city"] == "Lima"


@pytest.mark.asyncio
async def test_update_or_create_creates_missing(upsert_engine, db_session):
    outcome = await upsert_engine.upsert(
        "users", {"sync_id": "missing", "name": "New"}, UpsertMode.UPDATE_OR_CREATE
    )
    await db_session.commit()

    assert outcome is UpsertOutcome.NOT_FOUND_AND_CREATED
    assert (await upsert_engine.fetch("users", "missing"))["name"] == "New"


@pytest.mark.asyncio
async def test_update_only_reports_not_found_without_writing(upsert_engine, db_session):
    outcome = await upsert_engine.upsert("users", {"sync_id": "missing", "name": "New"}, UpsertMode.UPDATE_ONLY)

    assert outcome is UpsertOutcome.NOT_FOUND
    assert await upsert_engine.fetch("users", "missing") is None


@pytest.mark.asyncio
async def test_numeric_sync_id_is_stored_as_text(upsert_engine, db_session):
    await upsert_engine.upsert("users", {"sync_id": 7, "name": "Num"}, UpsertMode.MERGE)
    await db_session.commit()

    assert (await upsert_engine.fetch("users", "7"))["name"] == "Num"


@pytest.mark.asyncio
async def test_missing_sync_id_is_rejected(upsert_engine):
    with pytest.raises(MissingSyncIdException):
        await upsert_engine.upsert("users", {"name": "Ann"}, UpsertMode.MERGE)


@pytest.mark.asyncio
async def test_unknown_column_is_a_database_error(upsert_engine):
    with pytest.raises(RecordUpsertException) as exc_info:
        await upsert_engine.upsert("users", {"sync_id": "u1", "not_a_column": "x"}, UpsertMode.MERGE)

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_unknown_table_is_a_database_error(upsert_engine):
    with pytest.raises(RecordUpsertException):
        await upsert_engine.upsert("ghosts", {"sync_id": "u1"}, UpsertMode.MERGE)
