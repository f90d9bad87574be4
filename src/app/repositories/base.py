from typing import Any, Generic, Iterable, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Load

from app.core.db import Base

ModelT = TypeVar('ModelT', bound=Base)
CreateSchemaT = TypeVar('CreateSchemaT', bound=BaseModel)


class CRUDBase(Generic[ModelT, CreateSchemaT]):
    """Базовый класс для операций чтения и создания записей."""

    def __init__(self, model: Type[ModelT]) -> None:
        """Инициализация класса."""
        self.model = model

    async def get(
        self,
        session: AsyncSession,
        *predicates: Any,
        many: bool = False,
        order_by: Sequence[Any] = (),
        options: Iterable[Load] = (),
        **filters: Any,
    ) -> list[ModelT] | ModelT:
        """Универсальная выборка по равенствам полям модели.

        get(..., field=value, ...).

        Параметры:
            session: AsyncSession.
            *predicates: произвольные SQLAlchemy-условия
            (например, Model.is_active.is_(True)).
            many: True — вернуть список, False — вернуть первый или None.
            order_by: порядок выдачи.
            options: ORM-опции загрузки (selectinload и т.п.).
            **filters: равенства по полям модели (field=value).

        Исключения:
            ValueError — если передан фильтр по несуществующему полю модели.
        """
        self._validate_filters(filters)
        conditions = [getattr(self.model, k) == v for k, v in filters.items()]
        if predicates:
            conditions.extend(predicates)

        stmt = select(self.model).where(*conditions)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if options:
            stmt = stmt.options(*options)

        res = await session.execute(stmt)
        return list(res.scalars().all()) if many else res.scalars().first()

    async def get_active(
        self,
        session: AsyncSession,
        order_by: Sequence[Any] = (),
    ) -> list[ModelT]:
        """Получение всех активных записей таблицы."""
        return await self.get(
            session,
            self.model.is_active.is_(True),
            many=True,
            order_by=order_by,
        )

    async def create(
        self,
        obj_in: CreateSchemaT,
        session: AsyncSession,
        commit: bool = True,
    ) -> ModelT:
        """Создание записи в БД."""
        db_obj = self.model(**obj_in.model_dump(exclude_unset=True))
        session.add(db_obj)
        if commit:
            await session.commit()
            await session.refresh(db_obj)
        else:
            await session.flush()
        return db_obj

    def _validate_filters(self, filters: dict[str, Any]) -> None:
        """Валидация фильтров, примененных к get()."""
        unknown = [k for k in filters if not hasattr(self.model, k)]
        if unknown:
            raise ValueError(
                'Некорректные поля фильтра для '
                f'{self.model.__name__}: {unknown}',
            )
