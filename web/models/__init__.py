"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountingSettingsRequest,
    AdjustmentCreateRequest,
    AttendanceCreateRequest,
    AuditRecordRequest,
    CartLineRequest,
    ClosureCreateRequest,
    ExpenseCreateRequest,
    GiftCreateRequest,
    PurchaseCreateRequest,
    SaleCreateRequest,
    SaleItemRequest,
)
from web.models.responses import (
    AccountingSettingsResponse,
    AttendanceResponse,
    AuditEntryResponse,
    ClosureResponse,
    DREResponse,
    EventAppendResponse,
    EventListResponse,
    HealthResponse,
    SellerYieldResponse,
    TrailEntryResponse,
    UserRemovalResponse,
)

__all__ = [
    # Requests
    "AccountingSettingsRequest",
    "AdjustmentCreateRequest",
    "AttendanceCreateRequest",
    "AuditRecordRequest",
    "CartLineRequest",
    "ClosureCreateRequest",
    "ExpenseCreateRequest",
    "GiftCreateRequest",
    "PurchaseCreateRequest",
    "SaleCreateRequest",
    "SaleItemRequest",
    # Responses
    "AccountingSettingsResponse",
    "AttendanceResponse",
    "AuditEntryResponse",
    "ClosureResponse",
    "DREResponse",
    "EventAppendResponse",
    "EventListResponse",
    "HealthResponse",
    "SellerYieldResponse",
    "TrailEntryResponse",
    "UserRemovalResponse",
]
