import json
from functools import wraps
from typing import Any, Callable, Iterable, Optional

from loguru import logger

from app.core.exceptions import ReservationError

PERSONAL_FIELDS = frozenset({'first_name', 'last_name', 'email', 'phone'})


def _serialize(
    obj: Any,
    only_set: bool = True,
    exclude: Iterable[str] = (),
) -> dict | None:
    """Сериализует объект Pydantic в словарь для логирования."""
    if hasattr(obj, 'model_dump'):
        try:
            return obj.model_dump(
                mode='json',
                exclude_none=True,
                exclude_unset=only_set,
                exclude=set(exclude),
            )
        except Exception as e:
            logger.debug(
                f'Ошибка сериализации модели {e}',
            )
    return None


def _entity_id(result: Any) -> Optional[str]:
    """Идентификатор созданной записи из ответа эндпоинта."""
    for attr in ('reservation_id', 'id'):
        value = getattr(result, attr, None)
        if value is not None:
            return str(value)
    return None


def event_logger(
    event_type: str,
    table_name: str,
    only_set: bool = True,
    exclude: Iterable[str] = PERSONAL_FIELDS,
) -> Callable:
    """Декоратор для логирования выполнения эндпоинта.

    Логирует успешное выполнение асинхронной функции (эндпоинта)
    и возможные ошибки при выполнении операций с указанной таблицей.
    Персональные данные гостя в лог не попадают.

    Args:
        event_type: Тип события ('Создано', 'Обновлено').
        table_name: Название таблицы, над которой выполняется операция.
        only_set: Флаг, указывающий сериализовать ли только заданные поля.
            По умолчанию True.
        exclude: Поля, которые не выводятся в лог.

    Returns:
        Callable: Декоратор, оборачивающий асинхронную функцию и
            добавляющий логирование.

    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            parameters = next(
                (
                    data
                    for data in (
                        _serialize(v, only_set, exclude)
                        for v in kwargs.values()
                    )
                    if data is not None
                ),
                None,
            )
            try:
                result = await func(*args, **kwargs)
            except ReservationError as e:
                logger.info(
                    f'Запись в таблице "{table_name}" не создана: '
                    f'{e.error_code}',
                )
                raise
            except Exception:
                logger.error(
                    f'Произошла ошибка при выполнении операции с '
                    f'таблицей "{table_name}"',
                )
                raise
            if parameters is not None:
                formatted_params = json.dumps(
                    parameters,
                    ensure_ascii=False,
                    indent=4,
                )
                logger.info(
                    f'{event_type} запись {_entity_id(result) or ""} '
                    f'в таблице "{table_name}", '
                    f'с параметрами:\n{formatted_params}',
                )
            return result

        return wrapper

    return decorator
