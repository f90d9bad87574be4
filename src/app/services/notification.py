from datetime import datetime
from typing import Optional

from loguru import logger

from app.core.constants import DATE_FORMAT, TIME_FORMAT
from app.schemas.reservation import ReservationResult
from celery_app.tasks import send_email_task

DEFAULT_SUBJECT = 'Подтверждение бронирования'


def send_notification_task(
    emails: list[str],
    text: str,
    subject: str = DEFAULT_SUBJECT,
    html: bool = False,
    eta: Optional[datetime] = None,
) -> None:
    """Отправляет задачу в Celery на отправку уведомления.

    Args:
        emails (list[str]): список электронных адресов.
        text (str): текст уведомления.
        subject (str, optional): тема уведомления.
        html (bool, optional): флаг, указывающий, отправлять ли в HTML-формате.
        eta (Optional[datetime]): отправить уведомление к моменту времени.

    """
    send_email_task.apply_async(
        (emails, text, subject, html),
        eta=eta,
        queue='default',
    )


def build_confirmation_text(result: ReservationResult) -> str:
    """Текст письма о подтверждённом бронировании."""
    tables_info = ', '.join(
        f'№{table.number} ({table.capacity} мест)'
        for table in result.assigned_tables
    )
    period = (
        f'{result.reserved_from.strftime(TIME_FORMAT)}-'
        f'{result.reserved_to.strftime(TIME_FORMAT)}'
    )
    return f"""
Ваше бронирование подтверждено.

Номер бронирования: {result.reservation_id}
Дата: {result.reserved_from.strftime(DATE_FORMAT)}
Время: {period}
Количество гостей: {result.guest_number}
Столы: {tables_info}
Всего мест: {result.total_assigned_capacity}
"""


class NotificationService:
    """Сервис для уведомлений гостей о бронированиях."""

    @staticmethod
    def send_reservation_confirmation(
        result: ReservationResult,
        email: Optional[str],
    ) -> bool:
        """Ставит в очередь письмо с подтверждением бронирования.

        Returns:
            bool: False, если у гостя нет email и письмо не отправлялось.

        """
        if not email:
            logger.debug(
                f'Нет email для подтверждения бронирования '
                f'{result.reservation_id}',
            )
            return False
        send_notification_task(
            emails=[email],
            text=build_confirmation_text(result),
        )
        logger.info(
            f'Подтверждение бронирования {result.reservation_id} '
            'поставлено в очередь',
        )
        return True
