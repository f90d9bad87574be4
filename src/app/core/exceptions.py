from typing import Any, Optional
from uuid import UUID

from fastapi import status

from app.utils.enums import ReservationStep, StaffRole
from app.utils.http import build_error


class ReservationError(Exception):
    """Базовое исключение движка бронирования."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = 'RESERVATION_ERROR'
    retryable: bool = False

    def __init__(self, detail: str) -> None:
        """Сохраняет человекочитаемое описание ошибки."""
        super().__init__(detail)
        self.detail = detail
        self.step: Optional[ReservationStep] = None

    def as_dict(self) -> dict[str, Any]:
        """Представление ошибки для логов и ответа API."""
        return build_error(
            self.detail,
            self.status_code,
            error_code=self.error_code,
            retryable=self.retryable,
        )


class InputRejectedError(ReservationError):
    """Некорректные или недопустимые поля заявки."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = 'INPUT_REJECTED'


class NoAvailabilityError(ReservationError):
    """Нет подходящих столов: штатный отрицательный результат."""

    status_code = status.HTTP_409_CONFLICT
    error_code = 'NO_AVAILABILITY'
    retryable = True


class StaffAllocationError(ReservationError):
    """Не удалось укомплектовать бронирование персоналом."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = 'STAFF_UNAVAILABLE'
    retryable = True

    def __init__(
        self,
        role: StaffRole,
        table_id: Optional[UUID] = None,
    ) -> None:
        """Запоминает роль и стол, для которых не нашлось сотрудника."""
        super().__init__(
            'Не удалось назначить персонал для бронирования '
            f'(нет свободного сотрудника с ролью {role.value}). '
            'Выберите другое время или уменьшите число гостей.',
        )
        self.role = role
        self.table_id = table_id


class ReservationConflictError(ReservationError):
    """Конкурирующая транзакция заняла те же ресурсы."""

    status_code = status.HTTP_409_CONFLICT
    error_code = 'CONFLICT'
    retryable = True


class ReservationStorageError(ReservationError):
    """Непредвиденный сбой при сохранении бронирования."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = 'STORAGE_ERROR'
    retryable = True
