from datetime import date, time
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from loguru import logger

from app.core.db import DbSession
from app.core.dependencies import ReservationServiceDep
from app.core.exceptions import ReservationError
from app.repositories.reservation import reservation_repository
from app.schemas.common import ErrorResponse, ReservationErrorResponse
from app.schemas.reservation import (
    AvailabilityInfo,
    AvailabilityQuery,
    ReservationCreate,
    ReservationInfo,
    ReservationResult,
)
from app.services.notification import NotificationService
from app.utils.enums import TableChannel
from app.utils.http import build_error
from app.utils.logging_decorator import event_logger

router = APIRouter(prefix='/reservations', tags=['Бронирования'])


@router.post(
    '/',
    response_model=ReservationResult,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {'model': ReservationErrorResponse},
        status.HTTP_409_CONFLICT: {'model': ReservationErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            'model': ReservationErrorResponse,
        },
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            'model': ReservationErrorResponse,
        },
    },
)
@event_logger('Создано', 'Reservation')
async def create_reservation(
    reservation_data: ReservationCreate,
    service: ReservationServiceDep,
) -> ReservationResult:
    """Создает бронирование: подбирает столы и назначает персонал.

    Args:
        reservation_data: Заявка гостя
        service: Сервис бронирования
    Returns:
        ReservationResult: Назначенные столы и персонал
    Raises:
        ReservationError: 400 если заявка некорректна, 409 если нет
            подходящих столов или слот занят, 503 если не хватает
            персонала, 500 при непредвиденной ошибке

    """
    result = await service.reserve(reservation_data)
    try:
        NotificationService.send_reservation_confirmation(
            result,
            reservation_data.email,
        )
    except Exception as e:
        logger.error(f'Ошибка отправки уведомления: {str(e)}')
    return result


@router.get(
    '/availability',
    response_model=AvailabilityInfo,
    responses={
        status.HTTP_400_BAD_REQUEST: {'model': ReservationErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResponse},
    },
)
async def get_availability(
    service: ReservationServiceDep,
    reservation_date: date = Query(..., description='Дата бронирования'),
    reservation_time: time = Query(..., description='Время начала'),
    guest_number: int = Query(..., ge=1, description='Количество гостей'),
    channel: TableChannel = Query(
        TableChannel.OFFLINE,
        description='Канал бронирования',
    ),
) -> AvailabilityInfo:
    """Показывает свободные столы и состояние квот на слот.

    Args:
        service: Сервис бронирования
        reservation_date: Дата бронирования
        reservation_time: Время начала
        guest_number: Количество гостей
        channel: Канал бронирования
    Returns:
        AvailabilityInfo: Пул столов, предлагаемая комбинация и квоты
    Raises:
        ReservationError: 400 если число гостей вне диапазона
            или время уже прошло

    """
    query = AvailabilityQuery(
        reservation_date=reservation_date,
        reservation_time=reservation_time,
        guest_number=guest_number,
        channel=channel,
    )
    try:
        return await service.check_availability(query)
    except ReservationError:
        raise
    except Exception as e:
        logger.error(f'Ошибка при проверке свободных столов: {str(e)}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error(
                'Внутренняя ошибка сервера',
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            ),
        )


@router.get(
    '/{reservation_id}',
    response_model=ReservationInfo,
    responses={
        status.HTTP_404_NOT_FOUND: {'model': ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResponse},
    },
)
async def get_reservation_by_id(
    reservation_id: UUID,
    session: DbSession,
) -> ReservationInfo:
    """Получает бронирование со столами и назначениями персонала.

    Raises:
        HTTPException: 404 если бронирование не найдено

    """
    try:
        reservation = await reservation_repository.get_with_relations(
            session,
            reservation_id,
        )
        if not reservation:
            logger.warning(f'Бронирование {reservation_id} не найдено')
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=build_error(
                    'Бронирование не найдено',
                    status.HTTP_404_NOT_FOUND,
                ),
            )
        return reservation
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f'Ошибка при получении бронирования {reservation_id}: {str(e)}',
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error(
                'Внутренняя ошибка сервера',
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            ),
        )
