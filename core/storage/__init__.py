"""
스토리지 모듈

Audit Trail, Closure Store, Config Store 등 데이터 저장소 인터페이스 제공
"""

from core.storage.audit_store import AuditTrail
from core.storage.closure_store import ClosureStore
from core.storage.config_store import ConfigStore, init_default_configs

__all__ = [
    "AuditTrail",
    "ClosureStore",
    "ConfigStore",
    "init_default_configs",
]
