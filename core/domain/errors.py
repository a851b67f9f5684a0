"""
도메인 예외

Ledger/Audit/Closure 계층에서 발생하는 예외 정의.
Web 계층에서 HTTP 상태 코드로 매핑됨.
"""


class LedgerError(Exception):
    """도메인 예외 기본 클래스"""

    pass


class ValidationError(LedgerError):
    """잘못된 이벤트/입력 (기록 전에 거부됨)

    Args:
        message: 오류 메시지
        field: 문제가 된 필드 이름 (선택)
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ConsistencyError(LedgerError):
    """원자적 단위의 부분 성공

    Sale→Attendance 결합이나 사용자 삭제→감사 기록이 한쪽만
    반영된 경우. 치명적 오류로 운영자에게 노출되어야 함.
    """

    pass


class NotFoundError(LedgerError):
    """ID 기반 단건 조회 실패"""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class PermissionDeniedError(LedgerError):
    """역할 권한 부족"""

    pass
