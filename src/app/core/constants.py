from datetime import datetime

# Настройки движка бронирования (значения по умолчанию)
DEFAULT_RESERVATION_QUOTAS = {'ONLINE': {2: 3, 4: 6, 6: 2}}
DEFAULT_MAX_TABLES_PER_COMBINATION = 4
DEFAULT_MAX_TABLES_PER_STAFF = 3
DEFAULT_CHANNEL_SHIFT_LEAD_MINUTES = 10
DEFAULT_SLOT_DURATION_MINUTES = 60
DEFAULT_SMALL_PARTY_TIER_CAPACITY = 2
DEFAULT_MAX_GUEST_NUMBER = 100
ADVISORY_LOCK_NAMESPACE = 'reservation'

# Ограничения полей заявки
NAME_MAX_LENGTH = 200
NOTE_MAX_LENGTH = 300
DATE_FORMAT = '%Y-%m-%d'
TIME_FORMAT = '%H:%M'
HUMAN_TIME_FORMAT = '%I:%M %p'

# Настройки кеша каталога
TABLES_CACHE_KEY = 'catalog:tables'
STAFF_CACHE_KEY = 'catalog:staff'
CATALOG_CACHE_PATTERN = 'catalog:*'

# Настройки логгера
MS_IN_SECOND = 1000
LOG_DEPTH = 7
LOG_ENCODING = 'utf-8'
LOG_COMPRESSION = 'zip'
APP_LOG_FILE = 'app.log'
WORKER_LOG_FILE = 'worker.log'
RESERVATION_LOG_FILE = 'reservations.log'
RESERVATION_LOG_MODULES = (
    'app.services.reservation_service',
    'app.services.staff_allocator',
)
LOG_FORMAT = (
    '<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | '
    '<level>{level: <8}</level> | '
    '{extra[request_id]} | '
    '<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | '
    '<level>{message}</level>'
)
FILE_LOG_FORMAT = (
    '{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | '
    '{extra[request_id]} | '
    '{name}:{function}:{line} | {message}'
)
INTERCEPTED_LOGGERS = (
    'uvicorn',
    'uvicorn.error',
    'sqlalchemy',
    'celery',
)
NOISE_PATHS = {
    '/docs',
    '/openapi.json',
    '/healthcheck/db',
    '/healthcheck/redis',
}
HTTP_LOG_TEMPLATE = (
    '{method} {path} -> {status} ({ms:.1f} ms)\n    ip={ip}\n    ua={ua}\n'
)

# Разрешённый формат телефонного номера
PHONE_PATTERN = r'^\+[1-9][0-9]{7,14}$'


def get_logger_header() -> str:
    """Формирует заголовок для нового лог-файла."""
    return (
        '\n'
        '============== LOGGER - RESTAURANT_RESERVATIONS ==============\n'
        f'Date: {datetime.now():%Y-%m-%d %H:%M:%S}\n'
        '================================================================\n\n'
    )
