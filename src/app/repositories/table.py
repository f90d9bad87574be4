from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Table
from app.repositories.base import CRUDBase
from app.schemas.table import TableCreate


class TableRepository(CRUDBase[Table, TableCreate]):
    """Репозиторий для операций со столами."""

    def __init__(self) -> None:
        """Инициализация репозитория столов."""
        super().__init__(Table)

    async def get_catalog(self, session: AsyncSession) -> List[Table]:
        """Активные столы по возрастанию вместимости и номера."""
        return await self.get_active(
            session,
            order_by=(Table.capacity, Table.number),
        )

    async def add_missing(
        self,
        session: AsyncSession,
        tables: List[TableCreate],
    ) -> int:
        """Добавляет столы, номеров которых ещё нет в каталоге."""
        result = await session.execute(select(Table.number))
        existing = set(result.scalars().all())
        added = 0
        for obj_in in tables:
            if obj_in.number in existing:
                continue
            await self.create(obj_in, session, commit=False)
            existing.add(obj_in.number)
            added += 1
        await session.commit()
        return added


table_repository = TableRepository()
