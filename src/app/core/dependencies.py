from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.core.config import settings
from app.repositories.reservation import reservation_unit_of_work
from app.services.cache_service import CacheService, cache_service
from app.services.reservation_service import ReservationService


async def get_cache_service() -> CacheService:
    """Зависимость для получения сервиса кеширования."""
    return cache_service


@lru_cache
def get_reservation_service() -> ReservationService:
    """Зависимость для получения сервиса бронирования."""
    return ReservationService(
        unit_of_work=reservation_unit_of_work,
        config=settings.engine_config(),
    )


CacheServiceDep = Annotated[CacheService, Depends(get_cache_service)]
ReservationServiceDep = Annotated[
    ReservationService,
    Depends(get_reservation_service),
]
