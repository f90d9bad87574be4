from contextlib import asynccontextmanager
from datetime import date, time
from typing import Any, AsyncIterator, Optional, Sequence
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import func, select, union_all
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.constants import ADVISORY_LOCK_NAMESPACE
from app.core.db import transactional_session
from app.core.exceptions import ReservationConflictError
from app.models import (
    Reservation,
    ReservationTable,
    Staff,
    StaffAssignment,
    Table,
)
from app.repositories.base import CRUDBase
from app.services.quota_ledger import BookedTable
from app.services.staff_allocator import AssignmentDraft, StaffCandidate
from app.services.table_pool import TableCandidate
from app.services.time_window import TimeWindow
from app.utils.enums import (
    LIVE_RESERVATION_STATUSES,
    ReservationStatus,
    TableChannel,
)


class ReservationRepository(CRUDBase[Reservation, BaseModel]):
    """Репозиторий для чтения бронирований."""

    def __init__(self) -> None:
        """Инициализация репозитория бронирований."""
        super().__init__(Reservation)

    async def get_with_relations(
        self,
        session: AsyncSession,
        reservation_id: UUID,
    ) -> Optional[Reservation]:
        """Получает бронирование со столами и назначениями персонала."""
        return await self.get(
            session,
            id=reservation_id,
            options=[
                selectinload(Reservation.tables),
                selectinload(Reservation.staff_assignments),
            ],
        )


class SQLAlchemyReservationStore:
    """Хранилище движка бронирования поверх одной транзакции SA."""

    def __init__(self, session: AsyncSession) -> None:
        """Принимает сессию с уже открытой транзакцией."""
        self.session = session

    async def lock_window(self, window: TimeWindow) -> None:
        """Берёт транзакционные advisory-блокировки на даты интервала.

        Блокировки снимаются при commit/rollback; порядок дат
        фиксирован, чтобы конкурирующие транзакции не ждали друг друга
        по кругу.
        """
        for day in sorted(window.dates()):
            key = f'{ADVISORY_LOCK_NAMESPACE}:{day.isoformat()}'
            await self.session.execute(
                select(func.pg_advisory_xact_lock(func.hashtext(key))),
            )

    async def list_tables(self) -> list[TableCandidate]:
        """Каталог активных столов."""
        result = await self.session.execute(
            select(Table.id, Table.number, Table.capacity, Table.channel)
            .where(Table.is_active.is_(True))
            .order_by(Table.capacity, Table.number),
        )
        return [
            TableCandidate(
                id=row.id,
                number=row.number,
                capacity=row.capacity,
                channel=TableChannel(row.channel),
            )
            for row in result.all()
        ]

    async def list_booked_tables(
        self,
        window: TimeWindow,
    ) -> list[BookedTable]:
        """Столы действующих бронирований, пересекающихся с интервалом."""
        result = await self.session.execute(
            select(
                Table.id.label('table_id'),
                Table.capacity,
                Table.channel,
                Reservation.id.label('reservation_id'),
                Reservation.reserved_from,
                Reservation.reserved_to,
            )
            .join(ReservationTable, ReservationTable.table_id == Table.id)
            .join(
                Reservation,
                Reservation.id == ReservationTable.reservation_id,
            )
            .where(
                Reservation.reserved_from < window.end,
                Reservation.reserved_to > window.start,
                Reservation.status.in_(LIVE_RESERVATION_STATUSES),
                Reservation.is_active.is_(True),
            ),
        )
        return [
            BookedTable(
                table_id=row.table_id,
                capacity=row.capacity,
                channel=TableChannel(row.channel),
                reservation_id=row.reservation_id,
                window=TimeWindow(row.reserved_from, row.reserved_to),
            )
            for row in result.all()
        ]

    async def list_staff(self) -> list[StaffCandidate]:
        """Активный персонал."""
        result = await self.session.execute(
            select(Staff).where(Staff.is_active.is_(True)),
        )
        return [
            StaffCandidate(
                id=member.id,
                role=member.role,
                full_name=member.full_name,
            )
            for member in result.scalars().all()
        ]

    async def get_slot_load(
        self,
        slot_date: date,
        slot_time: time,
    ) -> dict[UUID, int]:
        """Число назначений каждого сотрудника в слоте по всем ролям."""
        assigned = union_all(
            *(
                select(column.label('staff_id')).where(
                    StaffAssignment.assignment_date == slot_date,
                    StaffAssignment.assignment_time == slot_time,
                )
                for column in (
                    StaffAssignment.waiter_id,
                    StaffAssignment.manager_id,
                    StaffAssignment.cleaner_id,
                )
            ),
        ).subquery()
        result = await self.session.execute(
            select(assigned.c.staff_id, func.count()).group_by(
                assigned.c.staff_id,
            ),
        )
        return {staff_id: count for staff_id, count in result.all()}

    async def add_reservation(
        self,
        requester: dict[str, Any],
        guest_number: int,
        window: TimeWindow,
        channel: TableChannel,
        status: ReservationStatus,
    ) -> UUID:
        """Создаёт запись бронирования."""
        reservation = Reservation(
            **requester,
            guest_number=guest_number,
            reservation_date=window.slot_date,
            reservation_time=window.slot_time,
            reserved_from=window.start,
            reserved_to=window.end,
            channel=channel,
            status=status,
        )
        self.session.add(reservation)
        await self.session.flush()
        return reservation.id

    async def link_tables(
        self,
        reservation_id: UUID,
        table_ids: Sequence[UUID],
    ) -> None:
        """Привязывает столы к бронированию."""
        self.session.add_all(
            ReservationTable(reservation_id=reservation_id, table_id=table_id)
            for table_id in table_ids
        )
        await self.session.flush()

    async def add_staff_assignments(
        self,
        reservation_id: UUID,
        drafts: Sequence[AssignmentDraft],
    ) -> None:
        """Сохраняет назначения персонала одной пачкой."""
        self.session.add_all(
            StaffAssignment(
                reservation_id=reservation_id,
                table_id=draft.table_id,
                assignment_date=draft.slot_date,
                assignment_time=draft.slot_time,
                waiter_id=draft.waiter_id,
                manager_id=draft.manager_id,
                cleaner_id=draft.cleaner_id,
            )
            for draft in drafts
        )
        await self.session.flush()


@asynccontextmanager
async def reservation_unit_of_work() -> AsyncIterator[
    SQLAlchemyReservationStore
]:
    """Единица работы бронирования: одна транзакция PostgreSQL.

    Нарушение уникальности (стол или слот персонала заняты
    конкурентом) превращается в ReservationConflictError.
    """
    try:
        async with transactional_session() as session:
            yield SQLAlchemyReservationStore(session)
    except IntegrityError as error:
        raise ReservationConflictError(
            'Выбранные столы или персонал только что заняты другим '
            'бронированием. Повторите попытку.',
        ) from error


reservation_repository = ReservationRepository()
