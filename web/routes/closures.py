"""
일일 마감 라우트

마감 실행 및 이력 조회 API
"""

from datetime import date, tzinfo

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.permissions import Permissions, require_role
from core.ledger.store import LedgerStore
from core.reports.closure_engine import ClosureEngine
from core.storage.closure_store import ClosureStore
from core.types import Actor
from core.utils.timezone import now_utc
from web.dependencies import get_actor, get_db, get_db_write, get_store_tz
from web.models.requests import ClosureCreateRequest
from web.models.responses import ClosureResponse

router = APIRouter(prefix="/api/closures", tags=["Closures"])


def _engine(db: SQLiteAdapter, tz: tzinfo) -> ClosureEngine:
    return ClosureEngine(LedgerStore(db), ClosureStore(db), tz)


@router.post("", response_model=ClosureResponse, status_code=201)
async def close_day(
    request: ClosureCreateRequest,
    actor: Actor = Depends(get_actor),
    tz: tzinfo = Depends(get_store_tz),
    db: SQLiteAdapter = Depends(get_db_write),
) -> ClosureResponse:
    """영업일 마감

    같은 날 재마감 시 새 스냅샷이 추가됨.
    """
    require_role(actor, Permissions.CLOSE_REGISTER, "close the register")

    business_day = request.business_day or now_utc().astimezone(tz).date()
    closure = await _engine(db, tz).close(business_day, closed_by=actor.name)

    return ClosureResponse(**closure.to_dict())


@router.get("", response_model=list[ClosureResponse])
async def list_closures(
    day: date | None = Query(default=None, description="영업일 (YYYY-MM-DD)"),
    actor: Actor = Depends(get_actor),
    tz: tzinfo = Depends(get_store_tz),
    db: SQLiteAdapter = Depends(get_db),
) -> list[ClosureResponse]:
    """마감 이력 (최신순, day 지정 시 해당 영업일만)"""
    require_role(
        actor, Permissions.CLOSE_REGISTER | Permissions.VIEW_REPORTS, "view closures"
    )

    closures = await _engine(db, tz).history(business_day=day)
    return [ClosureResponse(**c.to_dict()) for c in closures]


@router.get("/{closure_id}", response_model=ClosureResponse)
async def get_closure(
    closure_id: str = Path(..., description="마감 ID"),
    actor: Actor = Depends(get_actor),
    tz: tzinfo = Depends(get_store_tz),
    db: SQLiteAdapter = Depends(get_db),
) -> ClosureResponse:
    """마감 단건 조회"""
    require_role(
        actor, Permissions.CLOSE_REGISTER | Permissions.VIEW_REPORTS, "view closures"
    )

    closure = await _engine(db, tz).get(closure_id)
    return ClosureResponse(**closure.to_dict())
