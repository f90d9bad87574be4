import re
from typing import Optional

from email_validator import EmailNotValidError
from email_validator import validate_email as ev_validate

from app.core.constants import PHONE_PATTERN


def validate_email(value: Optional[str]) -> Optional[str]:
    """Возвращает читаемое сообщение при некорректном email."""
    if not (value and value.strip()):
        return None

    try:
        ev_validate(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(
            'Укажите адрес электронной почты, например: user@example.com',
        )
    return value


def validate_phone(value: Optional[str]) -> Optional[str]:
    """Возвращает читаемое сообщение при некорректном номере телефона."""
    if not (value and value.strip()):
        return None

    if not re.fullmatch(PHONE_PATTERN, value):
        raise ValueError(
            'Введите номер телефона в формате +XXXXXXXXX',
        )
    return value


def normalize_text(value: Optional[str], field_name: str) -> Optional[str]:
    """Очищает строку от лишних пробелов и приводит пустую к None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f'Поле "{field_name}" должно быть строкой')
    cleaned = value.strip()
    return cleaned or None
