from fastapi import APIRouter, HTTPException, status
from loguru import logger

from app.core.constants import STAFF_CACHE_KEY
from app.core.db import DbSession
from app.core.dependencies import CacheServiceDep
from app.repositories.staff import staff_repository
from app.schemas.common import ErrorResponse
from app.schemas.staff import StaffInfo
from app.utils.http import build_error

router = APIRouter(prefix='/staff', tags=['Персонал'])


@router.get(
    '/',
    response_model=list[StaffInfo],
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResponse},
    },
)
async def get_all_staff(
    session: DbSession,
    cache: CacheServiceDep,
) -> list[StaffInfo]:
    """Получает список активного персонала по ролям."""
    try:
        cached_staff = await cache.get(STAFF_CACHE_KEY)
        if cached_staff is not None:
            return [StaffInfo.model_validate(data) for data in cached_staff]
        staff = [
            StaffInfo.model_validate(member)
            for member in await staff_repository.get_catalog(session)
        ]
        await cache.set(
            STAFF_CACHE_KEY,
            [member.model_dump(mode='json') for member in staff],
        )
        return staff
    except Exception as e:
        logger.error(f'Ошибка при получении списка персонала: {str(e)}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error(
                'Внутренняя ошибка сервера',
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            ),
        )
