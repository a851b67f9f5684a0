"""
로깅 설정

Web 서버와 CLI 스크립트(월 마감 내보내기)가 함께 쓰는 로깅 구성.
Ledger/마감 코드는 extra={...}로 이벤트 ID, 종류 등을 넘기므로
포맷터가 이를 "key=value" 꼬리로 붙여 출력한다.

    2024-03-05 10:00:01 | INFO     | core.ledger.store | 이벤트 저장 완료 | kind=SALE event_id=...

사용법:
    from core.logging import setup_logging
    setup_logging("web")
    setup_logging("cli")
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7  # 일 단위 보관

# DB 쿼리/HTTP 클라이언트 상세 로그는 WARNING 이상만
NOISY_LOGGERS = (
    "aiosqlite",
    "httpcore",
    "httpx",
    "asyncio",
)

# LogRecord 기본 속성 (extra 판별용)
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class ContextFormatter(logging.Formatter):
    """extra 필드를 메시지 뒤에 붙이는 포맷터"""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not context:
            return line
        tail = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} | {tail}"


def _log_dir(process_name: str) -> Path:
    if process_name == "web":
        return Paths.WEB_LOGS_DIR
    if process_name == "cli":
        return Paths.CLI_LOGS_DIR
    return Paths.LOGS_DIR


def get_log_file_path(process_name: str) -> Path:
    """프로세스별 로그 파일 경로 (logs/web/web.log 등)"""
    return _log_dir(process_name) / f"{process_name}.log"


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
) -> logging.Logger:
    """루트 로거 구성

    콘솔(stdout) + 자정 기준 롤링 파일 핸들러 두 개만 둔다.
    재호출 시 기존 핸들러를 교체.

    Args:
        process_name: "web" 또는 "cli" (그 외는 logs/ 바로 아래)
        console_level: 콘솔 레벨
        file_level: 파일 레벨

    Returns:
        루트 Logger
    """
    log_file = get_log_file_path(process_name)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(min(console_level, file_level))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = ContextFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"  # web.log.2024-03-05
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(
        "로깅 초기화",
        extra={"process_name": process_name, "log_file": str(log_file)},
    )
    return root_logger
