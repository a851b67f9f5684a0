"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 정밀도 보존을 위해 문자열로 반환.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="운영 모드 (production/training)")
    store: str = Field(..., description="매장 이름")
    timestamp: datetime = Field(..., description="응답 시간 (UTC)")


class EventAppendResponse(BaseModel):
    """이벤트 저장 결과"""

    id: str = Field(..., description="이벤트 ID")
    kind: str = Field(..., description="이벤트 종류")


class EventListResponse(BaseModel):
    """이벤트 목록 응답"""

    events: list[dict[str, Any]] = Field(default_factory=list, description="이벤트 목록")
    count: int = Field(..., description="이벤트 수")


class AttendanceResponse(BaseModel):
    """고객 응대 응답"""

    id: str
    occurred_at: str
    seller_ref: str
    seller_name: str
    resulted_in_sale: bool


class AuditEntryResponse(BaseModel):
    """감사 로그 항목"""

    id: str
    action: str
    description: str
    performed_by: str
    timestamp: str


class UserRemovalResponse(BaseModel):
    """사용자 삭제 결과"""

    user_id: str = Field(..., description="삭제된 사용자 ID")
    audit_entry: AuditEntryResponse = Field(..., description="기록된 감사 로그")


class ClosureResponse(BaseModel):
    """일일 마감 응답"""

    id: str
    business_day: str
    closed_at: str
    closed_by: str
    total_sales: str
    total_gifts_at_cost: str
    sales_count: int
    gifts_count: int
    attendance_count: int
    net_adjustments: str
    payment_breakdown: dict[str, str]


class DREResponse(BaseModel):
    """월간 DRE 응답"""

    month: int
    year: int
    revenue: str
    taxes: str
    mdr: str
    expenses: str
    cmv: str
    net_profit: str


class AccountingSettingsResponse(BaseModel):
    """회계 설정 응답"""

    tax_rate: str
    mdr_pix: str
    mdr_card: str
    mdr_cash: str
    version: int = Field(..., description="설정 버전 (저장 전이면 0)")


class SellerYieldResponse(BaseModel):
    """판매자 생산성 응답"""

    seller_id: str
    name: str
    revenue: str
    sales_count: int
    attendance_count: int
    yield_per_attendance: str


class TrailEntryResponse(BaseModel):
    """자금 흐름 항목 응답"""

    id: str
    date: str
    direction: str
    source: str
    amount: str
    description: str
    performed_by: str
