import asyncio

from fastapi_mail.errors import ConnectionErrors
from loguru import logger

from app.core.notification import send_notification
from celery_app.main import celery_app


@celery_app.task(
    name='send-reservation-email',
    autoretry_for=(ConnectionErrors,),
    retry_backoff=True,
    max_retries=3,
)
def send_email_task(
    emails: list[str],
    text: str,
    subject: str,
    html: bool,
) -> None:
    """Таска на отправку письма гостю о бронировании."""
    asyncio.run(
        send_notification(
            emails=emails,
            text=text,
            subject=subject,
            html=html,
        ),
    )
    logger.info(f'Письмо "{subject}" отправлено: {", ".join(emails)}')
