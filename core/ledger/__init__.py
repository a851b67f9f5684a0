"""
Ledger (append-only 금전 이벤트 원장)

판매/현금 조정/선물/비용/매입 이벤트를 종류별로 저장.
정정은 보상 이벤트 추가로만 가능하며 수정/삭제는 없음.

사용 예시:
```python
from core.ledger import LedgerStore

ledger = LedgerStore(db, catalog=catalog)

# 판매 저장 (응대 기록 자동 생성)
await ledger.append(sale)

# 기간 조회 (occurred_at 오름차순)
async for event in ledger.query(from_=start, to=end):
    ...
```
"""

from core.ledger.store import KIND_TABLES, LedgerStore

__all__ = [
    "LedgerStore",
    "KIND_TABLES",
]
