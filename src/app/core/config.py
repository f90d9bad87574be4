from pathlib import Path
from typing import Optional

from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import URL

from app.core.constants import (
    DEFAULT_CHANNEL_SHIFT_LEAD_MINUTES,
    DEFAULT_MAX_GUEST_NUMBER,
    DEFAULT_MAX_TABLES_PER_COMBINATION,
    DEFAULT_MAX_TABLES_PER_STAFF,
    DEFAULT_RESERVATION_QUOTAS,
    DEFAULT_SLOT_DURATION_MINUTES,
    DEFAULT_SMALL_PARTY_TIER_CAPACITY,
)
from app.services.engine_config import EngineConfig
from app.utils.enums import TableChannel

BASE_DIR = Path(__file__).resolve().parents[3]
INFRA_DIR = BASE_DIR / 'infra'

LOG_DIR = BASE_DIR / 'logs'


class EmailSettings(BaseSettings):
    """Читает настройки из окружения с префиксом NOTIFY_."""

    MAIL_FROM: EmailStr
    MAIL_USERNAME: str
    MAIL_PASSWORD: str
    MAIL_PORT: int
    MAIL_SERVER: str
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False
    USE_CREDENTIALS: bool = True
    VALIDATE_CERTS: bool = True

    model_config = SettingsConfigDict(
        env_file=str(INFRA_DIR / '.env'),
        env_prefix='NOTIFY_',
        extra='allow',
    )


class Settings(BaseSettings):
    """Конфигурационный класс."""

    POSTGRES_DB: str
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_PORT: int
    POSTGRES_HOST: str

    REDIS_HOST: str
    REDIS_PORT: int
    REDIS_DB: int
    REDIS_PASSWORD: Optional[str] = None
    REDIS_CACHE_TTL: int = 300

    LOG_LEVEL: str = 'INFO'
    LOG_ROTATION: str = '10 MB'
    LOG_RETENTION: str = '14 days'

    RABBITMQ_DEFAULT_USER: str
    RABBITMQ_DEFAULT_PASS: str
    RABBITMQ_DEFAULT_VHOST: str
    RABBITMQ_DEFAULT_HOST: str
    RABBITMQ_DEFAULT_PORT: int

    TIMEZONE: str = 'UTC'
    RESERVATION_QUOTAS: dict[TableChannel, dict[int, int]] = (
        DEFAULT_RESERVATION_QUOTAS
    )
    MAX_TABLES_PER_COMBINATION: int = DEFAULT_MAX_TABLES_PER_COMBINATION
    MAX_TABLES_PER_STAFF: int = DEFAULT_MAX_TABLES_PER_STAFF
    CHANNEL_SHIFT_LEAD_MINUTES: int = DEFAULT_CHANNEL_SHIFT_LEAD_MINUTES
    SLOT_DURATION_MINUTES: int = DEFAULT_SLOT_DURATION_MINUTES
    SMALL_PARTY_TIER_CAPACITY: int = DEFAULT_SMALL_PARTY_TIER_CAPACITY
    MAX_GUEST_NUMBER: int = DEFAULT_MAX_GUEST_NUMBER
    CATALOG_SEED_PATH: Optional[Path] = None

    @property
    def db_url(self) -> URL:
        """Создает ссылку на подключение к Postgres."""
        return URL.create(
            drivername='postgresql+asyncpg',
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )

    @property
    def rabbit_url(self) -> str:
        """Создает ссылку на подключение к RabbitMQ."""
        return (
            'amqp://'
            f'{self.RABBITMQ_DEFAULT_USER}:{self.RABBITMQ_DEFAULT_PASS}@'
            f'{self.RABBITMQ_DEFAULT_HOST}:{self.RABBITMQ_DEFAULT_PORT}/'
            f'{self.RABBITMQ_DEFAULT_VHOST}'
        )

    @property
    def redis_url(self) -> str:
        """URL для подключения к Redis."""
        if self.REDIS_PASSWORD:
            return (
                f'redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}'
                f':{self.REDIS_PORT}/{self.REDIS_DB}'
            )
        return f'redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}'

    def engine_config(self) -> EngineConfig:
        """Собирает неизменяемую конфигурацию движка бронирования."""
        return EngineConfig.from_mapping(
            quotas=self.RESERVATION_QUOTAS,
            max_tables_per_combination=self.MAX_TABLES_PER_COMBINATION,
            max_tables_per_staff=self.MAX_TABLES_PER_STAFF,
            channel_shift_lead_minutes=self.CHANNEL_SHIFT_LEAD_MINUTES,
            slot_duration_minutes=self.SLOT_DURATION_MINUTES,
            small_party_tier_capacity=self.SMALL_PARTY_TIER_CAPACITY,
            max_guest_number=self.MAX_GUEST_NUMBER,
            timezone=self.TIMEZONE,
        )

    model_config = SettingsConfigDict(
        env_file=str(INFRA_DIR / '.env'),
        extra='allow',
    )


settings = Settings()
email_settings = EmailSettings()
