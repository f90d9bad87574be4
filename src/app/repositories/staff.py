from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Staff
from app.repositories.base import CRUDBase
from app.schemas.staff import StaffCreate


class StaffRepository(CRUDBase[Staff, StaffCreate]):
    """Репозиторий для операций с персоналом."""

    def __init__(self) -> None:
        """Инициализация репозитория персонала."""
        super().__init__(Staff)

    async def get_catalog(self, session: AsyncSession) -> List[Staff]:
        """Активный персонал по ролям и фамилиям."""
        return await self.get_active(
            session,
            order_by=(Staff.role, Staff.last_name, Staff.first_name),
        )

    async def add_missing(
        self,
        session: AsyncSession,
        staff: List[StaffCreate],
    ) -> int:
        """Добавляет сотрудников, которых ещё нет (по имени и роли)."""
        result = await session.execute(
            select(Staff.first_name, Staff.last_name, Staff.role),
        )
        existing = {tuple(row) for row in result.all()}
        added = 0
        for obj_in in staff:
            key = (obj_in.first_name, obj_in.last_name, obj_in.role)
            if key in existing:
                continue
            await self.create(obj_in, session, commit=False)
            existing.add(key)
            added += 1
        await session.commit()
        return added


staff_repository = StaffRepository()
