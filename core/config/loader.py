"""
설정 로더

settings.yaml 로드 및 매장/웹 설정 생성
"""

from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path

import yaml

from adapters.db.sqlite_adapter import get_db_path
from core.constants import Defaults, Paths
from core.types import RunMode
from core.utils.timezone import get_store_tz


@dataclass(frozen=True)
class StoreConfig:
    """매장 설정"""

    name: str
    timezone: str


@dataclass(frozen=True)
class WebConfig:
    """웹 서버 설정"""

    host: str
    port: int


@dataclass(frozen=True)
class AppConfig:
    """프로세스 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지.
    세율/MDR 같은 운영 중 변경되는 값은 config_store 테이블에서 관리.
    """

    mode: RunMode
    store: StoreConfig
    web: WebConfig


class SettingsLoadError(Exception):
    """settings.yaml 로드 실패 예외"""

    pass


def load_app_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    # mode 검증
    mode_str = data.get("mode")
    if mode_str is None:
        raise SettingsLoadError("settings.yaml에 'mode' 필드가 없습니다")

    try:
        mode = RunMode(str(mode_str).lower())
    except ValueError as e:
        valid_modes = [m.value for m in RunMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    store_data = data.get("store") or {}
    store = StoreConfig(
        name=str(store_data.get("name", Defaults.STORE_NAME)),
        timezone=str(store_data.get("timezone", Defaults.STORE_TIMEZONE)),
    )

    try:
        get_store_tz(store.timezone)
    except ValueError as e:
        raise SettingsLoadError(
            f"settings.yaml의 store.timezone이 올바르지 않습니다: '{store.timezone}'"
        ) from e

    web_data = data.get("web") or {}
    try:
        web = WebConfig(
            host=str(web_data.get("host", Defaults.WEB_HOST)),
            port=int(web_data.get("port", Defaults.WEB_PORT)),
        )
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"settings.yaml의 web.port가 올바르지 않습니다: {e}") from e

    return AppConfig(mode=mode, store=store, web=web)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_app_config(settings_path)

    @property
    def mode(self) -> RunMode:
        """현재 운영 모드"""
        assert self._config is not None
        return self._config.mode

    @property
    def store_name(self) -> str:
        assert self._config is not None
        return self._config.store.name

    @property
    def store_tz(self) -> tzinfo:
        """영업일 경계 타임존"""
        assert self._config is not None
        return get_store_tz(self._config.store.timezone)

    @property
    def web(self) -> WebConfig:
        assert self._config is not None
        return self._config.web

    @property
    def db_path(self) -> Path:
        """현재 모드의 DB 경로"""
        assert self._config is not None
        return get_db_path(self._config.mode)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
