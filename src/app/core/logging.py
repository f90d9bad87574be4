import logging
import sys
from pathlib import Path

from loguru import logger

from app.core.config import (
    LOG_DIR,
    settings,
)
from app.core.constants import (
    APP_LOG_FILE,
    FILE_LOG_FORMAT,
    INTERCEPTED_LOGGERS,
    LOG_COMPRESSION,
    LOG_DEPTH,
    LOG_ENCODING,
    LOG_FORMAT,
    RESERVATION_LOG_FILE,
    RESERVATION_LOG_MODULES,
    get_logger_header,
)

_STD_INTERCEPT_CONFIGURED = False


class InterceptHandler(logging.Handler):
    """Перехват stdlib логов (uvicorn, sqlalchemy, celery) в loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Передаёт запись стандартного логгера в Loguru."""
        try:
            lvl = logger.level(record.levelname).name
        except ValueError:
            lvl = record.levelno
        logger.opt(
            depth=LOG_DEPTH,
            exception=False,
        ).log(lvl, record.getMessage())


def setup_stdlib_intercept() -> None:
    """Перенаправляет стандартные логи (uvicorn, sqlalchemy и др.) в Loguru."""
    global _STD_INTERCEPT_CONFIGURED
    if _STD_INTERCEPT_CONFIGURED:
        return
    root = logging.getLogger()
    root.handlers = [InterceptHandler()]
    root.setLevel(logging.NOTSET)

    for name in INTERCEPTED_LOGGERS:
        log = logging.getLogger(name)
        log.handlers = [InterceptHandler()]
        log.propagate = False
    _STD_INTERCEPT_CONFIGURED = True


def _ensure_defaults(record: dict) -> dict:
    """Подставляет request_id для записей вне HTTP-запроса."""
    record['extra'].setdefault('request_id', '-')
    return record


def _is_reservation_record(record: dict) -> bool:
    """Записи движка бронирования: исходы попыток и нехватка персонала."""
    return record['name'] in RESERVATION_LOG_MODULES


def _prepare_log_file(name: str) -> Path:
    """Создаёт каталог логов и пишет заголовок в новый файл."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    path = LOG_DIR / name
    if not path.exists() or path.stat().st_size == 0:
        try:
            with open(path, 'a', encoding=LOG_ENCODING) as f:
                f.write(get_logger_header())
        except IOError as e:
            print(f'Не удалось записать заголовок в файл {path}: {e}')
    return path


def _add_file_sink(path: Path, **kwargs) -> None:
    logger.add(
        path,
        level=settings.LOG_LEVEL,
        rotation=settings.LOG_ROTATION,
        retention=settings.LOG_RETENTION,
        compression=LOG_COMPRESSION,
        format=FILE_LOG_FORMAT,
        encoding=LOG_ENCODING,
        enqueue=True,
        backtrace=False,
        diagnose=False,
        **kwargs,
    )


def configure_logging(log_file_name: str = APP_LOG_FILE) -> None:
    """Настраивает Loguru и подключает перехват логов stdlib.

    Sinks: stdout, общий файл процесса (``app.log`` для API,
    ``worker.log`` для Celery) и ``reservations.log`` только с записями
    движка бронирования, чтобы разбирать отказы без шума HTTP-логов.
    """
    logger.remove()
    logger.configure(patcher=_ensure_defaults)

    logger.add(
        sys.stdout,
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        colorize=True,
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )
    _add_file_sink(_prepare_log_file(log_file_name))
    _add_file_sink(
        _prepare_log_file(RESERVATION_LOG_FILE),
        filter=_is_reservation_record,
    )

    setup_stdlib_intercept()
