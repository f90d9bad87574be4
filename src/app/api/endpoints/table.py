from fastapi import APIRouter, HTTPException, status
from loguru import logger

from app.core.constants import TABLES_CACHE_KEY
from app.core.db import DbSession
from app.core.dependencies import CacheServiceDep
from app.repositories.table import table_repository
from app.schemas.common import ErrorResponse
from app.schemas.table import TableInfo
from app.utils.http import build_error

router = APIRouter(prefix='/tables', tags=['Столы'])


@router.get(
    '/',
    response_model=list[TableInfo],
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResponse},
    },
)
async def get_all_tables(
    session: DbSession,
    cache: CacheServiceDep,
) -> list[TableInfo]:
    """Получает каталог активных столов.

    Args:
        session: Асинхронная сессия базы данных
        cache: Сервис кеширования
    Returns:
        list[TableInfo]: Столы по возрастанию вместимости и номера

    """
    try:
        cached_tables = await cache.get(TABLES_CACHE_KEY)
        if cached_tables is not None:
            return [TableInfo.model_validate(data) for data in cached_tables]
        tables = [
            TableInfo.model_validate(table)
            for table in await table_repository.get_catalog(session)
        ]
        await cache.set(
            TABLES_CACHE_KEY,
            [table.model_dump(mode='json') for table in tables],
        )
        return tables
    except Exception as e:
        logger.error(f'Ошибка при получении каталога столов: {str(e)}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error(
                'Внутренняя ошибка сервера',
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            ),
        )
