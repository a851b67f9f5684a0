"""
Web 서비스 패키지

비즈니스 로직 처리
"""

from web.services.settings_service import SettingsService

__all__ = [
    "SettingsService",
]
