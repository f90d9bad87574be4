import random
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Mapping, Optional, Sequence
from uuid import UUID

from loguru import logger

from app.core.constants import DEFAULT_MAX_TABLES_PER_STAFF
from app.core.exceptions import StaffAllocationError
from app.services.table_pool import TableCandidate
from app.utils.enums import STAFF_ROLES_ORDER, StaffRole


@dataclass(frozen=True)
class StaffCandidate:
    """Сотрудник зала."""

    id: UUID
    role: StaffRole
    full_name: str


@dataclass(frozen=True)
class AssignmentDraft:
    """Черновик назначения персонала на стол в слоте."""

    table_id: UUID
    slot_date: date
    slot_time: time
    waiter_id: UUID
    manager_id: UUID
    cleaner_id: UUID

    def staff_by_role(self) -> dict[StaffRole, UUID]:
        """Назначенные сотрудники по ролям."""
        return {
            StaffRole.WAITER: self.waiter_id,
            StaffRole.MANAGER: self.manager_id,
            StaffRole.CLEANER: self.cleaner_id,
        }


class StaffAllocator:
    """Назначает официанта, менеджера и уборщика на каждый стол.

    Сотрудник выбирается случайно среди подходящих: у него нужная роль,
    в этом бронировании он не занят в другой роли, а его нагрузка в слоте
    (включая уже распределённые столы этого бронирования) меньше
    ``max_tables_per_staff``.
    """

    def __init__(
        self,
        max_tables_per_staff: int = DEFAULT_MAX_TABLES_PER_STAFF,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Инициализация распределителя."""
        self.max_tables_per_staff = max_tables_per_staff
        self._rng = rng or random.SystemRandom()

    def allocate(
        self,
        tables: Sequence[TableCandidate],
        staff: Iterable[StaffCandidate],
        slot_load: Mapping[UUID, int],
        slot_date: date,
        slot_time: time,
    ) -> list[AssignmentDraft]:
        """Распределяет персонал по всем столам бронирования.

        Raises:
            StaffAllocationError: Если хотя бы одну роль хотя бы для одного
                стола заполнить нельзя; частичное распределение не
                возвращается.

        """
        by_role: dict[StaffRole, list[StaffCandidate]] = defaultdict(list)
        for member in sorted(staff, key=lambda member: str(member.id)):
            by_role[member.role].append(member)

        load = Counter(slot_load)
        used_roles: dict[UUID, StaffRole] = {}
        drafts: list[AssignmentDraft] = []
        for table in tables:
            picked: dict[StaffRole, UUID] = {}
            for role in STAFF_ROLES_ORDER:
                eligible = [
                    member
                    for member in by_role.get(role, ())
                    if used_roles.get(member.id, role) == role
                    and member.id not in picked.values()
                    and load[member.id] < self.max_tables_per_staff
                ]
                if not eligible:
                    logger.warning(
                        f'Нет свободного сотрудника с ролью {role.value} '
                        f'для стола {table.number} на {slot_date} '
                        f'{slot_time:%H:%M} '
                        f'(лимит {self.max_tables_per_staff} столов)',
                    )
                    raise StaffAllocationError(role, table.id)
                chosen = self._rng.choice(eligible)
                picked[role] = chosen.id
                used_roles[chosen.id] = role
                load[chosen.id] += 1
            drafts.append(
                AssignmentDraft(
                    table_id=table.id,
                    slot_date=slot_date,
                    slot_time=slot_time,
                    waiter_id=picked[StaffRole.WAITER],
                    manager_id=picked[StaffRole.MANAGER],
                    cleaner_id=picked[StaffRole.CLEANER],
                ),
            )
        return drafts
