"""
매입 임포트 라우트

NF-e XML 원문(요청 본문)을 Purchase로 변환해 기록.
"""

from fastapi import APIRouter, Depends, Request

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.nfe.parser import parse_nfe
from core.domain.permissions import Permissions, require_role
from core.ledger.store import LedgerStore
from core.types import Actor
from web.dependencies import get_actor, get_db_write
from web.models.responses import EventAppendResponse

router = APIRouter(prefix="/api/purchases", tags=["Purchases"])


@router.post("/nfe", response_model=EventAppendResponse, status_code=201)
async def import_nfe(
    request: Request,
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db_write),
) -> EventAppendResponse:
    """NF-e XML 임포트

    본문은 application/xml 원문. 같은 접근 키의 NF-e는 한 번만 기록됨.
    """
    require_role(actor, Permissions.RECORD_EXPENSE, "import supplier invoices")

    content = await request.body()
    purchase = parse_nfe(content, performed_by=actor.user_id)

    event_id = await LedgerStore(db).append(purchase)
    return EventAppendResponse(id=event_id, kind=purchase.kind.value)
