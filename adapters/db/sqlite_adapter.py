"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
여러 계산대(운영자)가 같은 DB 파일에 동시 접근 가능하도록 설정.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Paths
from core.types import RunMode

logger = logging.getLogger(__name__)

# Ledger 컬렉션 (종류별 독립 테이블, append-only)
LEDGER_TABLES: tuple[str, ...] = (
    "sales",
    "adjustments",
    "gifts",
    "expenses",
    "purchases",
)

# UPDATE/DELETE를 트리거로 차단하는 테이블
APPEND_ONLY_TABLES: tuple[str, ...] = LEDGER_TABLES + (
    "attendances",
    "audit_log",
    "closures",
)


def get_db_path(mode: RunMode | str) -> Path:
    """모드에 따른 DB 경로 반환

    Args:
        mode: 운영 모드 (PRODUCTION/TRAINING)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if isinstance(mode, str):
        mode = RunMode(mode.lower())

    if mode == RunMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.TRAINING_DB


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로 (":memory:" 허용)
        readonly: 읽기 전용 여부

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)
    in_memory = db_path_str == ":memory:"

    # 디렉토리가 없으면 생성
    if not in_memory:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if readonly and not in_memory:
        conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
    else:
        conn = await aiosqlite.connect(db_path_str)

    # WAL 모드 설정 (읽기는 쓰기를 막지 않음)
    await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    await conn.execute("PRAGMA foreign_keys=ON")

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (리포트 조회용)

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction() as conn:
        await conn.execute("INSERT INTO ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchall()

    async def iterate(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> AsyncIterator[tuple[Any, ...]]:
        """행 단위 지연 조회

        단일 SELECT 문으로 읽으므로 실행 시점의 스냅샷을 반환.
        """
        cursor = await self.execute(sql, parameters)
        try:
            async for row in cursor:
                yield row
        finally:
            await cursor.close()

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        try:
            yield self._conn
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def _ledger_table_ddl(table: str, extra_columns: str) -> str:
    """Ledger 테이블 DDL

    공통 컬럼(seq, event_id, occurred_at, performed_by, payload_json)은
    모든 Ledger 테이블에서 동일해야 함 (UNION ALL 조회).
    """
    return f"""
        CREATE TABLE IF NOT EXISTS {table} (
            seq              INTEGER PRIMARY KEY AUTOINCREMENT,
            event_id         TEXT NOT NULL UNIQUE,
            occurred_at      TEXT NOT NULL,
            performed_by     TEXT NOT NULL,
            {extra_columns}
            payload_json     TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    Args:
        adapter: 연결된 SQLiteAdapter

    앱 시작 시 호출. 모든 DDL은 IF NOT EXISTS로 재실행 안전.
    """
    # Ledger 컬렉션 (종류별 인덱스용 컬럼만 별도 보관, 나머지는 payload_json)
    await adapter.execute(_ledger_table_ddl("sales", """
            payment_method   TEXT NOT NULL,
            total            TEXT NOT NULL,
    """))
    await adapter.execute(_ledger_table_ddl("adjustments", """
            adjustment_kind  TEXT NOT NULL,
            amount           TEXT NOT NULL,
    """))
    await adapter.execute(_ledger_table_ddl("gifts", """
            total_value_at_cost TEXT NOT NULL,
    """))
    await adapter.execute(_ledger_table_ddl("expenses", """
            status           TEXT NOT NULL,
            amount           TEXT NOT NULL,
    """))
    await adapter.execute(_ledger_table_ddl("purchases", """
            invoice_key      TEXT NOT NULL DEFAULT '',
            total_value      TEXT NOT NULL,
    """))

    # attendances (고객 응대)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS attendances (
            seq              INTEGER PRIMARY KEY AUTOINCREMENT,
            attendance_id    TEXT NOT NULL UNIQUE,
            occurred_at      TEXT NOT NULL,
            seller_ref       TEXT NOT NULL,
            seller_name      TEXT NOT NULL,
            resulted_in_sale INTEGER NOT NULL DEFAULT 0,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # audit_log (감사 로그)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS audit_log (
            seq              INTEGER PRIMARY KEY AUTOINCREMENT,
            entry_id         TEXT NOT NULL UNIQUE,
            action           TEXT NOT NULL,
            description      TEXT NOT NULL,
            performed_by     TEXT NOT NULL,
            ts               TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # closures (일일 마감 스냅샷)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS closures (
            seq                  INTEGER PRIMARY KEY AUTOINCREMENT,
            closure_id           TEXT NOT NULL UNIQUE,
            business_day         TEXT NOT NULL,
            closed_at            TEXT NOT NULL,
            closed_by            TEXT NOT NULL,
            total_sales          TEXT NOT NULL,
            total_gifts_at_cost  TEXT NOT NULL,
            sales_count          INTEGER NOT NULL,
            gifts_count          INTEGER NOT NULL,
            attendance_count     INTEGER NOT NULL,
            net_adjustments      TEXT NOT NULL,
            payment_breakdown_json TEXT NOT NULL,
            created_at           TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # config_store (런타임 설정)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS config_store (
            id           INTEGER PRIMARY KEY AUTOINCREMENT,
            config_key   TEXT NOT NULL UNIQUE,
            value_json   TEXT NOT NULL,
            version      INTEGER NOT NULL DEFAULT 1,

            updated_by   TEXT NOT NULL,
            created_at   TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at   TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # 인덱스 생성
    for table in LEDGER_TABLES + ("attendances",):
        await adapter.execute(f"""
            CREATE INDEX IF NOT EXISTS ix_{table}_occurred_at
            ON {table}(occurred_at)
        """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_attendances_seller
        ON attendances(seller_ref, occurred_at)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_audit_log_ts
        ON audit_log(ts)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_closures_business_day
        ON closures(business_day)
    """)

    # 같은 NF-e 중복 임포트 방지 (빈 키는 제외)
    await adapter.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS ux_purchases_invoice_key
        ON purchases(invoice_key) WHERE invoice_key <> ''
    """)

    # append-only 보장: UPDATE/DELETE 차단
    for table in APPEND_ONLY_TABLES:
        await adapter.execute(f"""
            CREATE TRIGGER IF NOT EXISTS trg_{table}_no_update
            BEFORE UPDATE ON {table}
            BEGIN
                SELECT RAISE(ABORT, '{table} is append-only');
            END
        """)
        await adapter.execute(f"""
            CREATE TRIGGER IF NOT EXISTS trg_{table}_no_delete
            BEFORE DELETE ON {table}
            BEGIN
                SELECT RAISE(ABORT, '{table} is append-only');
            END
        """)

    await adapter.commit()

    logger.info("스키마 초기화 완료")
