from typing import Any


def build_error(detail: Any, code: int, **extra: Any) -> dict[str, Any]:
    """Формирует унифицированный ответ об ошибке для API.

    Дополнительные поля (например, ``error_code`` и ``retryable``
    для исходов бронирования) добавляются после ``code`` и ``detail``.
    """
    return {
        'code': code,
        'detail': str(detail) if detail is not None else '',
        **extra,
    }
