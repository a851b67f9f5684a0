"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 Decimal로 받음 (JSON 숫자 또는 문자열 모두 허용).
도메인 규칙(합계 일치, 양수 등)은 도메인 모델에서 검증.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class SaleItemRequest(BaseModel):
    """판매 품목"""

    product_ref: str = Field(..., description="상품 식별자")
    product_name: str = Field(default="", description="상품명")
    quantity: int = Field(..., description="수량")
    unit_price_at_sale: Decimal = Field(..., description="판매 단가")
    note: str | None = Field(default=None, description="가격 변경 사유 등")


class SaleCreateRequest(BaseModel):
    """판매 기록 요청

    seller_id/seller_name 생략 시 호출자를 판매자로 사용.
    total 생략 시 품목 합계로 계산.
    """

    items: list[SaleItemRequest] = Field(..., description="품목 목록")
    payment_method: str = Field(..., description="결제 수단 (CASH/PIX/CARD/STORE_CREDIT/OTHER)")
    total: Decimal | None = Field(default=None, description="합계")
    payment_details: str | None = Field(default=None, description="결제 상세 메모")
    seller_id: str | None = Field(default=None, description="판매자 ID")
    seller_name: str | None = Field(default=None, description="판매자 이름")
    occurred_at: datetime | None = Field(default=None, description="발생 시각")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_ref": "VEST-001",
                            "product_name": "Vestido Floral",
                            "quantity": 1,
                            "unit_price_at_sale": "100.00",
                        }
                    ],
                    "payment_method": "PIX",
                }
            ]
        }
    }


class AdjustmentCreateRequest(BaseModel):
    """현금 시재 조정 요청"""

    adjustment_kind: str = Field(..., description="SURPLUS 또는 SHORTAGE")
    amount: Decimal = Field(..., description="금액 (양수)")
    justification: str = Field(..., description="사유")
    occurred_at: datetime | None = Field(default=None, description="발생 시각")


class CartLineRequest(BaseModel):
    """선물 품목 (원가 기준)"""

    product_ref: str = Field(..., description="상품 식별자")
    product_name: str = Field(default="", description="상품명")
    quantity: int = Field(..., description="수량")
    unit_cost: Decimal = Field(..., description="원가")


class GiftCreateRequest(BaseModel):
    """협찬/선물 출고 요청"""

    items: list[CartLineRequest] = Field(..., description="품목 목록")
    recipient_name: str = Field(..., description="수령인")
    authorized_by: str | None = Field(default=None, description="승인자 (생략 시 호출자)")
    total_value_at_cost: Decimal | None = Field(default=None, description="원가 합계")
    occurred_at: datetime | None = Field(default=None, description="발생 시각")


class ExpenseCreateRequest(BaseModel):
    """외부 서비스 비용 요청"""

    category: str = Field(..., description="VIDEO/MAINTENANCE/MARKETING/OTHER")
    provider_name: str = Field(..., description="제공자")
    description: str = Field(default="", description="내용")
    amount: Decimal = Field(..., description="금액 (양수)")
    status: str = Field(default="PAID", description="PAID 또는 PENDING")
    occurred_at: datetime | None = Field(default=None, description="발생 시각")


class PurchaseCreateRequest(BaseModel):
    """공급사 매입 수동 기록 요청"""

    supplier_name: str = Field(..., description="공급사")
    tax_id: str = Field(default="", description="CNPJ")
    total_value: Decimal = Field(..., description="총액")
    invoice_number: str = Field(default="", description="NF 번호")
    invoice_key: str = Field(default="", description="NF-e 접근 키")
    invoice_date: datetime | None = Field(default=None, description="발행일")


class AttendanceCreateRequest(BaseModel):
    """고객 응대 기록 요청"""

    seller_id: str | None = Field(default=None, description="판매자 ID (생략 시 호출자)")
    seller_name: str | None = Field(default=None, description="판매자 이름")
    resulted_in_sale: bool = Field(default=False, description="판매 성사 여부")
    occurred_at: datetime | None = Field(default=None, description="발생 시각")


class AuditRecordRequest(BaseModel):
    """감사 로그 기록 요청"""

    action: str = Field(..., description="작업 태그 (예: USER_DELETED)")
    description: str = Field(..., description="설명")


class ClosureCreateRequest(BaseModel):
    """일일 마감 요청"""

    business_day: date | None = Field(default=None, description="영업일 (생략 시 오늘)")


class AccountingSettingsRequest(BaseModel):
    """회계 설정 변경 요청 (각 비율 0~1)"""

    tax_rate: Decimal = Field(..., description="세율")
    mdr_pix: Decimal = Field(..., description="PIX 수수료율")
    mdr_card: Decimal = Field(..., description="카드 수수료율")
    mdr_cash: Decimal = Field(default=Decimal("0"), description="현금 수수료율")
    expected_version: int | None = Field(default=None, description="예상 버전 (낙관적 락)")
