from datetime import date, datetime, time, timezone
from typing import (
    Any,
    AsyncContextManager,
    Callable,
    Optional,
    Protocol,
    Sequence,
)
from uuid import UUID

from loguru import logger

from app.core.constants import DATE_FORMAT, HUMAN_TIME_FORMAT
from app.core.exceptions import (
    InputRejectedError,
    NoAvailabilityError,
    ReservationError,
    ReservationStorageError,
    StaffAllocationError,
)
from app.schemas.reservation import (
    AssignedStaffInfo,
    AssignedTableInfo,
    AvailabilityInfo,
    AvailabilityQuery,
    ReservationCreate,
    ReservationResult,
    TierQuotaInfo,
)
from app.services.combination_search import find_best_combination
from app.services.engine_config import EngineConfig, Tier
from app.services.quota_ledger import BookedTable, QuotaLedger
from app.services.staff_allocator import (
    AssignmentDraft,
    StaffAllocator,
    StaffCandidate,
)
from app.services.table_pool import (
    TableCandidate,
    TablePool,
    channel_shift_applies,
)
from app.services.time_window import TimeWindow
from app.utils.enums import (
    STAFF_ROLES_ORDER,
    ReservationStatus,
    ReservationStep,
    TableChannel,
)


class ReservationStore(Protocol):
    """Операции хранилища, доступные движку внутри единицы работы."""

    async def lock_window(self, window: TimeWindow) -> None:
        """Блокирует интервал от конкурирующих бронирований."""

    async def list_tables(self) -> list[TableCandidate]:
        """Каталог активных столов."""

    async def list_booked_tables(
        self,
        window: TimeWindow,
    ) -> list[BookedTable]:
        """Столы действующих бронирований, пересекающихся с интервалом."""

    async def list_staff(self) -> list[StaffCandidate]:
        """Активный персонал."""

    async def get_slot_load(
        self,
        slot_date: date,
        slot_time: time,
    ) -> dict[UUID, int]:
        """Число назначений каждого сотрудника в слоте."""

    async def add_reservation(
        self,
        requester: dict[str, Any],
        guest_number: int,
        window: TimeWindow,
        channel: TableChannel,
        status: ReservationStatus,
    ) -> UUID:
        """Создаёт запись бронирования и возвращает её идентификатор."""

    async def link_tables(
        self,
        reservation_id: UUID,
        table_ids: Sequence[UUID],
    ) -> None:
        """Привязывает столы к бронированию."""

    async def add_staff_assignments(
        self,
        reservation_id: UUID,
        drafts: Sequence[AssignmentDraft],
    ) -> None:
        """Сохраняет назначения персонала одной пачкой."""


UnitOfWorkFactory = Callable[[], AsyncContextManager[ReservationStore]]


def utc_now() -> datetime:
    """Текущее время в UTC."""
    return datetime.now(timezone.utc)


class ReservationService:
    """Транзакция бронирования: столы, квоты, персонал, фиксация.

    Шаги ``VALIDATED -> POOL_BUILT -> TABLES_CHOSEN -> STAFF_ASSIGNED ->
    COMMITTED``; любая ошибка переводит попытку в ``ABORTED`` и откатывает
    единицу работы целиком. Блокировка интервала берётся до чтения
    занятости, поэтому конкурирующие заявки на пересекающиеся интервалы
    выполняются последовательно.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWorkFactory,
        config: EngineConfig,
        clock: Callable[[], datetime] = utc_now,
        allocator: Optional[StaffAllocator] = None,
    ) -> None:
        """Инициализация сервиса бронирования."""
        self._unit_of_work = unit_of_work
        self.config = config
        self._clock = clock
        self._allocator = allocator or StaffAllocator(
            config.max_tables_per_staff,
        )

    def now(self) -> datetime:
        """Текущее время в часовом поясе ресторана."""
        return self._clock().astimezone(self.config.timezone)

    def build_window(
        self,
        reservation_date: date,
        reservation_time: time,
    ) -> TimeWindow:
        """Интервал бронирования стандартной длительности."""
        start = datetime.combine(
            reservation_date,
            reservation_time.replace(tzinfo=None),
            tzinfo=self.config.timezone,
        )
        return TimeWindow.from_start(start, self.config.slot_duration)

    def validate(
        self,
        guest_number: int,
        reservation_date: date,
        reservation_time: time,
    ) -> TimeWindow:
        """Проверяет заявку до открытия транзакции.

        Raises:
            InputRejectedError: Если число гостей вне диапазона
                или время уже прошло.

        """
        if not 1 <= guest_number <= self.config.max_guest_number:
            raise InputRejectedError(
                'Количество гостей должно быть от 1 до '
                f'{self.config.max_guest_number}',
            )
        window = self.build_window(reservation_date, reservation_time)
        if window.start < self.now():
            raise InputRejectedError(
                'Нельзя бронировать на прошедшее время. '
                'Выберите время в будущем.',
            )
        return window

    async def reserve(self, obj_in: ReservationCreate) -> ReservationResult:
        """Создаёт бронирование со столами и назначенным персоналом.

        Args:
            obj_in: Заявка гостя.

        Returns:
            ReservationResult: Идентификатор, столы и сгруппированный
                по сотрудникам состав персонала.

        Raises:
            InputRejectedError: Заявка некорректна, транзакция не открывалась.
            NoAvailabilityError: Подходящей комбинации столов нет.
            StaffAllocationError: Не хватает персонала, всё откатано.
            ReservationConflictError: Конкурирующая запись, можно повторить.
            ReservationStorageError: Непредвиденный сбой, всё откатано.

        """
        window = self.validate(
            obj_in.guest_number,
            obj_in.reservation_date,
            obj_in.reservation_time,
        )
        step = ReservationStep.VALIDATED
        now = self.now()
        try:
            async with self._unit_of_work() as store:
                await store.lock_window(window)
                booked = await store.list_booked_tables(window)
                ledger = QuotaLedger(self.config.quotas, booked, window)
                shifted = channel_shift_applies(
                    obj_in.channel,
                    window,
                    now,
                    self.config.channel_shift_lead,
                )
                candidates = TablePool(await store.list_tables(), booked).build(
                    obj_in.channel,
                    window,
                    ledger,
                    shifted=shifted,
                )
                step = ReservationStep.POOL_BUILT
                logger.debug(
                    f'Пул столов на {window.start:%Y-%m-%d %H:%M} '
                    f'({obj_in.channel.value}, перевод={shifted}): '
                    f'{[table.number for table in candidates]}; '
                    f'квоты: {ledger.snapshot()}',
                )

                chosen = find_best_combination(
                    candidates,
                    obj_in.guest_number,
                    self.config.max_tables_per_combination,
                )
                if not chosen:
                    raise NoAvailabilityError(
                        self._no_availability_message(
                            obj_in,
                            window,
                            ledger,
                        ),
                    )
                step = ReservationStep.TABLES_CHOSEN

                reservation_id = await store.add_reservation(
                    obj_in.requester_fields(),
                    obj_in.guest_number,
                    window,
                    obj_in.channel,
                    ReservationStatus.CONFIRMED,
                )
                await store.link_tables(
                    reservation_id,
                    [table.id for table in chosen],
                )
                staff = await store.list_staff()
                drafts = self._allocator.allocate(
                    chosen,
                    staff,
                    await store.get_slot_load(
                        window.slot_date,
                        window.slot_time,
                    ),
                    window.slot_date,
                    window.slot_time,
                )
                step = ReservationStep.STAFF_ASSIGNED
                await store.add_staff_assignments(reservation_id, drafts)
        except ReservationError as error:
            error.step = step
            self._log_abort(error, obj_in, step)
            raise
        except Exception as error:
            logger.opt(exception=True).error(
                f'Бронирование прервано на шаге {step.value}: {error}; '
                f'заявка: {self._describe(obj_in)}',
            )
            storage_error = ReservationStorageError(
                'Непредвиденная ошибка сервера при бронировании. '
                'Повторите попытку позже.',
            )
            storage_error.step = step
            raise storage_error from error

        logger.info(
            f'Бронирование {reservation_id} {ReservationStep.COMMITTED.value}: '
            f'{obj_in.guest_number} гостей, столы '
            f'{[table.number for table in chosen]}',
        )
        return ReservationResult(
            reservation_id=reservation_id,
            status=ReservationStatus.CONFIRMED,
            channel=obj_in.channel,
            guest_number=obj_in.guest_number,
            reserved_from=window.start,
            reserved_to=window.end,
            assigned_tables=[
                AssignedTableInfo.model_validate(table) for table in chosen
            ],
            total_assigned_capacity=sum(table.capacity for table in chosen),
            assigned_staff=group_staff(drafts, staff),
            message=(
                f'Бронирование на {obj_in.guest_number} гостей '
                'успешно создано.'
            ),
        )

    async def check_availability(
        self,
        query: AvailabilityQuery,
    ) -> AvailabilityInfo:
        """Показывает свободные столы на слот без создания бронирования."""
        window = self.validate(
            query.guest_number,
            query.reservation_date,
            query.reservation_time,
        )
        async with self._unit_of_work() as store:
            booked = await store.list_booked_tables(window)
            tables = await store.list_tables()
        ledger = QuotaLedger(self.config.quotas, booked, window)
        shifted = channel_shift_applies(
            query.channel,
            window,
            self.now(),
            self.config.channel_shift_lead,
        )
        candidates = TablePool(tables, booked).build(
            query.channel,
            window,
            ledger,
            shifted=shifted,
        )
        suggested = find_best_combination(
            candidates,
            query.guest_number,
            self.config.max_tables_per_combination,
        )
        return AvailabilityInfo(
            reservation_date=query.reservation_date,
            reservation_time=query.reservation_time,
            channel=query.channel,
            guest_number=query.guest_number,
            channel_shift=shifted,
            tables=[
                AssignedTableInfo.model_validate(table)
                for table in candidates
            ],
            suggested_tables=[
                AssignedTableInfo.model_validate(table) for table in suggested
            ],
            quotas={
                key: TierQuotaInfo(**value)
                for key, value in ledger.snapshot().items()
            },
        )

    def _no_availability_message(
        self,
        obj_in: ReservationCreate,
        window: TimeWindow,
        ledger: QuotaLedger,
    ) -> str:
        """Текст отказа; для малых онлайн-компаний уточняет причину."""
        when = (
            f'{window.start.strftime(HUMAN_TIME_FORMAT)} '
            f'{window.start.strftime(DATE_FORMAT)}'
        )
        small_tier = Tier(
            self.config.small_party_tier_capacity,
            TableChannel.ONLINE,
        )
        if (
            obj_in.channel == TableChannel.ONLINE
            and obj_in.guest_number <= small_tier.capacity
            and ledger.is_exhausted(small_tier)
        ):
            return (
                'Выберите следующий слот: все онлайн-столы на '
                f'{small_tier.capacity} места заняты на {when}.'
            )
        if obj_in.channel == TableChannel.OFFLINE:
            return (
                'Нет свободных столов зала или освободившихся онлайн-столов '
                f'для {obj_in.guest_number} гостей на {when}. '
                'Выберите другое время.'
            )
        return (
            f'Нет подходящих столов для {obj_in.guest_number} гостей '
            f'на {when}. Выберите другое время или уменьшите число гостей.'
        )

    def _log_abort(
        self,
        error: ReservationError,
        obj_in: ReservationCreate,
        step: ReservationStep,
    ) -> None:
        """Логирует прерванную попытку с уровнем по типу ошибки."""
        message = (
            f'Бронирование не создано на шаге {step.value} '
            f'({error.error_code}): {error.detail}'
        )
        if isinstance(error, NoAvailabilityError):
            logger.info(message)
        elif isinstance(error, StaffAllocationError):
            logger.warning(f'{message}; заявка: {self._describe(obj_in)}')
        else:
            logger.error(f'{message}; заявка: {self._describe(obj_in)}')

    @staticmethod
    def _describe(obj_in: ReservationCreate) -> dict[str, Any]:
        """Параметры заявки для диагностики, без персональных данных."""
        return obj_in.model_dump(
            mode='json',
            include={
                'guest_number',
                'reservation_date',
                'reservation_time',
                'channel',
            },
        )


def group_staff(
    drafts: Sequence[AssignmentDraft],
    staff: Sequence[StaffCandidate],
) -> list[AssignedStaffInfo]:
    """Группирует назначения по сотрудникам с уникальными столами."""
    staff_by_id = {member.id: member for member in staff}
    grouped: dict[UUID, AssignedStaffInfo] = {}
    for draft in drafts:
        assigned = draft.staff_by_role()
        for role in STAFF_ROLES_ORDER:
            member = staff_by_id[assigned[role]]
            info = grouped.setdefault(
                member.id,
                AssignedStaffInfo(
                    staff_id=member.id,
                    name=member.full_name,
                    role=member.role,
                    assigned_table_ids=[],
                ),
            )
            if draft.table_id not in info.assigned_table_ids:
                info.assigned_table_ids.append(draft.table_id)
    return list(grouped.values())
