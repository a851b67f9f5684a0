"""
AuditTrail - 감사 로그 저장소

권한이 필요한 관리 작업(사용자 삭제, 설정 변경 등)을 append-only로 기록.
조회는 항상 최신순.
"""

import logging

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.records import AuditLogEntry
from core.utils.timezone import from_db_ts, to_db_ts

logger = logging.getLogger(__name__)


class AuditTrail:
    """감사 로그 저장소

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    audit = AuditTrail(db)
    await audit.record(
        AuditLogEntry.create("USER_DELETED", "Removed seller Ana", "owner-1")
    )
    entries = await audit.list("ana")
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def record(self, entry: AuditLogEntry) -> AuditLogEntry:
        """감사 로그 기록

        Raises:
            ValidationError: action/description/performed_by 누락
        """
        entry.validate()

        try:
            await self.db.execute(
                """
                INSERT INTO audit_log (entry_id, action, description, performed_by, ts)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    entry.entry_id,
                    entry.action,
                    entry.description,
                    entry.performed_by,
                    to_db_ts(entry.timestamp),
                ),
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(
                "감사 로그 저장 실패",
                extra={"entry_id": entry.entry_id, "error": str(e)},
            )
            raise

        logger.info(
            "감사 로그 기록",
            extra={
                "entry_id": entry.entry_id,
                "action": entry.action,
                "performed_by": entry.performed_by,
            },
        )
        return entry

    async def list(self, filter: str | None = None) -> list[AuditLogEntry]:
        """감사 로그 조회 (최신순)

        Args:
            filter: action/description/performed_by 부분 문자열 (대소문자 무시)

        Returns:
            AuditLogEntry 리스트
        """
        rows = await self.db.fetchall(
            """
            SELECT entry_id, action, description, performed_by, ts
            FROM audit_log
            ORDER BY ts DESC, seq DESC
            """
        )

        entries = [
            AuditLogEntry(
                entry_id=row[0],
                action=row[1],
                description=row[2],
                performed_by=row[3],
                timestamp=from_db_ts(row[4]),
            )
            for row in rows
        ]

        if filter:
            entries = [e for e in entries if e.matches(filter)]

        return entries
