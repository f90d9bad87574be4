from typing import Dict

from fastapi import APIRouter
from loguru import logger
from sqlalchemy import text

from app.core.db import DbSession
from app.core.dependencies import CacheServiceDep

router = APIRouter(prefix='/healthcheck', tags=['Healthcheck'])


@router.get('/db')
async def db_health(session: DbSession) -> Dict[str, str]:
    """Проверка состояния БД."""
    try:
        result = await session.execute(text('SELECT 1'))
        _ = result.scalar()
        logger.debug('Проверка БД: успешно')
        return {'status': 'ok'}
    except Exception as e:
        logger.error(f'Ошибка проверки БД: {str(e)}')
        return {'status': 'error', 'details': str(e)}


@router.get('/redis')
async def redis_health(cache: CacheServiceDep) -> Dict[str, str]:
    """Проверка состояния Redis."""
    try:
        if cache.redis:
            await cache.redis.ping()
            logger.debug('Проверка Redis: успешно')
            return {'status': 'ok'}
        logger.error('Redis не подключен')
        return {'status': 'error', 'details': 'Redis не подключен'}
    except Exception as e:
        logger.error(f'Ошибка проверки Redis: {str(e)}')
        return {'status': 'error', 'details': str(e)}
