"""
NF-e XML 파서

공급사 전자세금계산서(NF-e) XML에서 매입 정보를 추출하여 Purchase 이벤트 생성.
네임스페이스(http://www.portalfiscal.inf.br/nfe)와 무관하게 태그 로컬 이름으로 탐색.

추출 필드:
- emit/xNome → supplier_name (첫 번째 xNome = 발행자)
- emit/CNPJ → tax_id
- total/ICMSTot/vNF → total_value
- ide/nNF → invoice_number
- ide/dhEmi → invoice_date
- infNFe@Id ("NFe" 접두사 제거) → invoice_key
"""

import logging
import xml.etree.ElementTree as ET
from datetime import datetime

from core.domain.errors import ValidationError
from core.domain.events import Purchase
from core.utils.money import to_decimal

logger = logging.getLogger(__name__)

UNKNOWN_SUPPLIER = "Desconhecido"
UNKNOWN_INVOICE_NUMBER = "N/A"


def _local_name(tag: str) -> str:
    """'{namespace}tag' → 'tag'"""
    return tag.rsplit("}", 1)[-1]


def _find_first(root: ET.Element, name: str) -> ET.Element | None:
    for element in root.iter():
        if _local_name(element.tag) == name:
            return element
    return None


def _find_text(root: ET.Element, name: str) -> str | None:
    element = _find_first(root, name)
    if element is None or element.text is None:
        return None
    text = element.text.strip()
    return text or None


def parse_nfe(
    xml_content: str | bytes,
    performed_by: str,
    occurred_at: datetime | None = None,
) -> Purchase:
    """NF-e XML → Purchase

    Args:
        xml_content: NF-e XML 문자열 또는 바이트
        performed_by: 임포트 수행자 ID
        occurred_at: 임포트 시각 (None이면 현재)

    Returns:
        Purchase 이벤트 (아직 저장되지 않음)

    Raises:
        ValidationError: XML 파싱 실패 또는 NF-e가 아님
    """
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        logger.warning("NF-e XML 파싱 실패", extra={"error": str(e)})
        raise ValidationError("O arquivo XML fornecido não é uma NF-e válida.") from e

    inf_nfe = _find_first(root, "infNFe")
    total_text = _find_text(root, "vNF")
    if inf_nfe is None and total_text is None:
        raise ValidationError("O arquivo XML fornecido não é uma NF-e válida.")

    invoice_key = ""
    if inf_nfe is not None:
        invoice_key = inf_nfe.get("Id", "").replace("NFe", "", 1).strip()

    invoice_date = None
    date_text = _find_text(root, "dhEmi")
    if date_text:
        try:
            invoice_date = datetime.fromisoformat(date_text)
        except ValueError as e:
            raise ValidationError(f"Invalid dhEmi: {date_text!r}", field="invoice_date") from e

    purchase = Purchase.create(
        performed_by=performed_by,
        supplier_name=_find_text(root, "xNome") or UNKNOWN_SUPPLIER,
        tax_id=_find_text(root, "CNPJ") or "",
        total_value=to_decimal(total_text or "0", "total_value"),
        invoice_number=_find_text(root, "nNF") or UNKNOWN_INVOICE_NUMBER,
        invoice_key=invoice_key,
        invoice_date=invoice_date,
        occurred_at=occurred_at,
    )
    purchase.validate()

    logger.info(
        "NF-e 파싱 완료",
        extra={"invoice_key": invoice_key, "supplier": purchase.supplier_name},
    )
    return purchase
