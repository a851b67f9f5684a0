"""
AuditTrail 테스트
"""

import sqlite3

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.errors import ValidationError
from core.domain.records import AuditLogEntry
from core.storage.audit_store import AuditTrail
from factories import utc


@pytest.fixture
def audit(db: SQLiteAdapter) -> AuditTrail:
    return AuditTrail(db)


class TestRecord:
    @pytest.mark.asyncio
    async def test_record_and_list(self, audit: AuditTrail) -> None:
        entry = AuditLogEntry.create("USER_DELETED", "Usuário removido: Bia", "Maria")

        recorded = await audit.record(entry)
        entries = await audit.list()

        assert recorded == entry
        assert entries == [entry]

    @pytest.mark.asyncio
    async def test_invalid_entry_rejected(self, audit: AuditTrail) -> None:
        with pytest.raises(ValidationError):
            await audit.record(AuditLogEntry.create("", "x", "Maria"))

        assert await audit.list() == []

    @pytest.mark.asyncio
    async def test_entries_cannot_be_deleted(self, audit: AuditTrail, db: SQLiteAdapter) -> None:
        await audit.record(AuditLogEntry.create("USER_DELETED", "x", "Maria"))

        with pytest.raises(sqlite3.IntegrityError):
            await db.execute("DELETE FROM audit_log")


class TestList:
    @pytest.mark.asyncio
    async def test_newest_first(self, audit: AuditTrail) -> None:
        old = AuditLogEntry.create("A", "primeiro", "Maria", timestamp=utc(2024, 3, 1, 10))
        new = AuditLogEntry.create("B", "segundo", "Maria", timestamp=utc(2024, 3, 1, 11))

        await audit.record(new)
        await audit.record(old)

        assert [e.action for e in await audit.list()] == ["B", "A"]

    @pytest.mark.asyncio
    async def test_same_timestamp_later_write_first(self, audit: AuditTrail) -> None:
        ts = utc(2024, 3, 1, 10)
        await audit.record(AuditLogEntry.create("FIRST", "x", "Maria", timestamp=ts))
        await audit.record(AuditLogEntry.create("SECOND", "x", "Maria", timestamp=ts))

        assert [e.action for e in await audit.list()] == ["SECOND", "FIRST"]

    @pytest.mark.asyncio
    async def test_filter_case_insensitive(self, audit: AuditTrail) -> None:
        await audit.record(AuditLogEntry.create("USER_DELETED", "Usuário removido: Bia", "Maria"))
        await audit.record(AuditLogEntry.create("SETTINGS_CHANGED", "Taxas", "Paulo"))

        assert [e.action for e in await audit.list("bia")] == ["USER_DELETED"]
        assert [e.action for e in await audit.list("PAULO")] == ["SETTINGS_CHANGED"]
        assert await audit.list("ninguém") == []
