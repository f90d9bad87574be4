import json
from typing import Any, Optional

from loguru import logger
from redis.asyncio import Redis

from app.core.config import settings
from app.core.constants import CATALOG_CACHE_PATTERN


class CacheService:
    """Сервис для работы с кешем Redis.

    Кеш необязателен: без подключения методы возвращают промах,
    и данные читаются из БД.
    """

    def __init__(self) -> None:
        """Инициализация без подключения."""
        self.redis: Optional[Redis] = None
        self.ttl = settings.REDIS_CACHE_TTL

    async def connect(self) -> None:
        """Установка подключения к Redis."""
        try:
            self.redis = Redis.from_url(
                settings.redis_url,
                encoding='utf-8',
                decode_responses=True,
            )
            await self.redis.ping()
            logger.info('Успешное подключение к Redis')
        except Exception as e:
            logger.error(f'Ошибка подключения к Redis: {str(e)}')
            self.redis = None

    async def disconnect(self) -> None:
        """Закрытие подключения к Redis."""
        if self.redis:
            await self.redis.aclose()
            logger.info('Отключение от Redis')

    async def get(self, key: str) -> Optional[Any]:
        """Получение значения по ключу."""
        if not self.redis:
            return None
        try:
            data = await self.redis.get(key)
            if data:
                logger.debug(f'Кеш попадание: {key}')
                return json.loads(data)
            logger.debug(f'Кеш промах: {key}')
            return None
        except Exception as e:
            logger.error(f'Ошибка получения из кеша {key}: {str(e)}')
            return None

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> bool:
        """Сохранение значения в кеш."""
        if not self.redis:
            return False
        try:
            serialized_value = json.dumps(value, default=str)
            await self.redis.setex(key, ttl or self.ttl, serialized_value)
            return True
        except Exception as e:
            logger.error(f'Ошибка сохранения в кеш {key}: {str(e)}')
            return False

    async def delete_pattern(self, pattern: str) -> bool:
        """Удаление ключей по шаблону."""
        if not self.redis:
            return False
        try:
            keys = [key async for key in self.redis.scan_iter(match=pattern)]
            if keys:
                await self.redis.delete(*keys)
                logger.info(
                    f'Удалено ключей по шаблону {pattern}: {len(keys)}',
                )
            return True
        except Exception as e:
            logger.error(f'Ошибка удаления по шаблону: {str(e)}')
            return False

    async def clear_catalog_cache(self) -> None:
        """Очистка кеша каталога столов и персонала."""
        await self.delete_pattern(CATALOG_CACHE_PATTERN)


cache_service = CacheService()
