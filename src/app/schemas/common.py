from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Базовая схема ответа с описанием ошибки."""

    code: int
    detail: str


class ReservationErrorResponse(ErrorResponse):
    """Ошибка бронирования с типом исхода и признаком повторяемости."""

    error_code: str
    retryable: bool
