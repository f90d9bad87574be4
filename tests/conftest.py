"""Shared fixtures: in-memory reservation store and catalog factories."""

import asyncio
import os
from collections import Counter
from contextlib import asynccontextmanager
from datetime import date, datetime, time, timedelta, timezone
from uuid import UUID, uuid4

import pytest

os.environ.setdefault('POSTGRES_DB', 'reservations')
os.environ.setdefault('POSTGRES_USER', 'postgres')
os.environ.setdefault('POSTGRES_PASSWORD', 'postgres')
os.environ.setdefault('POSTGRES_PORT', '5432')
os.environ.setdefault('POSTGRES_HOST', 'localhost')
os.environ.setdefault('REDIS_HOST', 'localhost')
os.environ.setdefault('REDIS_PORT', '6379')
os.environ.setdefault('REDIS_DB', '0')
os.environ.setdefault('RABBITMQ_DEFAULT_USER', 'guest')
os.environ.setdefault('RABBITMQ_DEFAULT_PASS', 'guest')
os.environ.setdefault('RABBITMQ_DEFAULT_VHOST', 'vhost')
os.environ.setdefault('RABBITMQ_DEFAULT_HOST', 'localhost')
os.environ.setdefault('RABBITMQ_DEFAULT_PORT', '5672')
os.environ.setdefault('NOTIFY_MAIL_FROM', 'noreply@example.com')
os.environ.setdefault('NOTIFY_MAIL_USERNAME', 'noreply')
os.environ.setdefault('NOTIFY_MAIL_PASSWORD', 'secret')
os.environ.setdefault('NOTIFY_MAIL_PORT', '587')
os.environ.setdefault('NOTIFY_MAIL_SERVER', 'smtp.example.com')

from app.core.exceptions import ReservationConflictError  # noqa: E402
from app.schemas.reservation import ReservationCreate  # noqa: E402
from app.services.engine_config import EngineConfig  # noqa: E402
from app.services.quota_ledger import BookedTable  # noqa: E402
from app.services.reservation_service import ReservationService  # noqa: E402
from app.services.staff_allocator import StaffCandidate  # noqa: E402
from app.services.table_pool import TableCandidate  # noqa: E402
from app.services.time_window import TimeWindow  # noqa: E402
from app.utils.enums import (  # noqa: E402
    LIVE_RESERVATION_STATUSES,
    ReservationStatus,
    StaffRole,
    TableChannel,
)

SLOT_DATE = date(2026, 5, 1)
SLOT_TIME = time(11, 0)
MORNING = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


def make_table(
    number: int,
    capacity: int,
    channel: TableChannel = TableChannel.ONLINE,
) -> TableCandidate:
    """Build a catalog table."""
    return TableCandidate(
        id=uuid4(),
        number=number,
        capacity=capacity,
        channel=channel,
    )


def make_staff(role: StaffRole, count: int = 1) -> list[StaffCandidate]:
    """Build ``count`` staff members with the given role."""
    return [
        StaffCandidate(
            id=uuid4(),
            role=role,
            full_name=f'{role.value.title()} {index}',
        )
        for index in range(1, count + 1)
    ]


def full_crew(per_role: int = 2) -> list[StaffCandidate]:
    """Waiters, managers and cleaners, ``per_role`` of each."""
    return [
        member
        for role in StaffRole
        for member in make_staff(role, per_role)
    ]


def make_request(**overrides) -> ReservationCreate:
    """Build a reservation request for the default slot."""
    data = {
        'first_name': 'Anna',
        'last_name': 'Smirnova',
        'email': 'anna@example.com',
        'guest_number': 2,
        'reservation_date': SLOT_DATE,
        'reservation_time': SLOT_TIME,
        'channel': TableChannel.ONLINE,
    }
    data.update(overrides)
    return ReservationCreate(**data)


def make_window(
    start: time = SLOT_TIME,
    day: date = SLOT_DATE,
    hours: int = 1,
) -> TimeWindow:
    """Build a UTC window starting at ``start`` on ``day``."""
    begin = datetime.combine(day, start, tzinfo=timezone.utc)
    return TimeWindow.from_start(begin, timedelta(hours=hours))


class InMemoryDatabase:
    """Committed state shared by all units of work."""

    def __init__(
        self,
        tables: list[TableCandidate],
        staff: list[StaffCandidate],
    ) -> None:
        self.tables = list(tables)
        self.staff = list(staff)
        self.reservations: dict[UUID, dict] = {}
        self.links: list[tuple[UUID, UUID]] = []
        self.assignments: list[tuple[UUID, object]] = []
        self.lock = asyncio.Lock()
        self.units_opened = 0
        self.commits = 0
        self.fail_on: str | None = None

    def book(
        self,
        tables: list[TableCandidate],
        window: TimeWindow,
        status: ReservationStatus = ReservationStatus.CONFIRMED,
    ) -> UUID:
        """Insert an already committed reservation holding ``tables``."""
        reservation_id = uuid4()
        self.reservations[reservation_id] = {
            'window': window,
            'status': status,
            'channel': TableChannel.ONLINE,
            'guest_number': sum(table.capacity for table in tables),
        }
        self.links.extend((reservation_id, table.id) for table in tables)
        return reservation_id

    def table_windows(self) -> dict[UUID, list[TimeWindow]]:
        """Windows of live reservations per table."""
        windows: dict[UUID, list[TimeWindow]] = {}
        for reservation_id, table_id in self.links:
            reservation = self.reservations[reservation_id]
            if reservation['status'] in LIVE_RESERVATION_STATUSES:
                windows.setdefault(table_id, []).append(reservation['window'])
        return windows


class InMemoryStore:
    """Store protocol over ``InMemoryDatabase`` with buffered writes."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db
        self.locked = False
        self.reservations: dict[UUID, dict] = {}
        self.links: list[tuple[UUID, UUID]] = []
        self.assignments: list[tuple[UUID, object]] = []

    async def _step(self, name: str) -> None:
        await asyncio.sleep(0)
        if self.db.fail_on == name:
            raise RuntimeError(f'{name} failed')

    async def lock_window(self, window: TimeWindow) -> None:
        await self.db.lock.acquire()
        self.locked = True

    async def list_tables(self) -> list[TableCandidate]:
        await self._step('list_tables')
        return list(self.db.tables)

    async def list_booked_tables(self, window: TimeWindow) -> list[BookedTable]:
        await self._step('list_booked_tables')
        tables = {table.id: table for table in self.db.tables}
        reservations = {**self.db.reservations, **self.reservations}
        booked = []
        for reservation_id, table_id in self.db.links + self.links:
            reservation = reservations[reservation_id]
            if reservation['status'] not in LIVE_RESERVATION_STATUSES:
                continue
            if not reservation['window'].overlaps(window):
                continue
            table = tables[table_id]
            booked.append(
                BookedTable(
                    table_id=table.id,
                    capacity=table.capacity,
                    channel=table.channel,
                    reservation_id=reservation_id,
                    window=reservation['window'],
                ),
            )
        return booked

    async def list_staff(self) -> list[StaffCandidate]:
        await self._step('list_staff')
        return list(self.db.staff)

    async def get_slot_load(self, slot_date: date, slot_time: time) -> dict:
        await self._step('get_slot_load')
        load = Counter()
        for _, draft in self.db.assignments + self.assignments:
            if (draft.slot_date, draft.slot_time) != (slot_date, slot_time):
                continue
            for staff_id in draft.staff_by_role().values():
                load[staff_id] += 1
        return dict(load)

    async def add_reservation(
        self,
        requester,
        guest_number,
        window,
        channel,
        status,
    ) -> UUID:
        await self._step('add_reservation')
        reservation_id = uuid4()
        self.reservations[reservation_id] = {
            'window': window,
            'status': status,
            'channel': channel,
            'guest_number': guest_number,
            **requester,
        }
        return reservation_id

    async def link_tables(self, reservation_id, table_ids) -> None:
        await self._step('link_tables')
        self.links.extend((reservation_id, table_id) for table_id in table_ids)

    async def add_staff_assignments(self, reservation_id, drafts) -> None:
        await self._step('add_staff_assignments')
        self.assignments.extend((reservation_id, draft) for draft in drafts)

    def commit(self) -> None:
        slots = {
            (draft.table_id, draft.slot_date, draft.slot_time)
            for _, draft in self.db.assignments
        }
        for _, draft in self.assignments:
            if (draft.table_id, draft.slot_date, draft.slot_time) in slots:
                raise ReservationConflictError('Слот стола уже занят')
        self.db.reservations.update(self.reservations)
        self.db.links.extend(self.links)
        self.db.assignments.extend(self.assignments)
        self.db.commits += 1


def in_memory_unit_of_work(db: InMemoryDatabase):
    """Unit-of-work factory: commit on clean exit, discard on error."""

    @asynccontextmanager
    async def unit_of_work():
        db.units_opened += 1
        store = InMemoryStore(db)
        try:
            yield store
            store.commit()
        finally:
            if store.locked:
                db.lock.release()

    return unit_of_work


@pytest.fixture
def config() -> EngineConfig:
    """Default engine configuration with the standard online quotas."""
    return EngineConfig.from_mapping({'ONLINE': {2: 3, 4: 6, 6: 2}})


@pytest.fixture
def make_service(config):
    """Factory for a service bound to an in-memory database."""

    def factory(db: InMemoryDatabase, now: datetime = MORNING, **kwargs):
        return ReservationService(
            unit_of_work=in_memory_unit_of_work(db),
            config=kwargs.pop('config', config),
            clock=lambda: now,
            **kwargs,
        )

    return factory
