from datetime import date, datetime, time
from typing import Annotated, Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from app.core.constants import NAME_MAX_LENGTH, NOTE_MAX_LENGTH
from app.utils.enums import ReservationStatus, StaffRole, TableChannel
from app.utils.validators import normalize_text, validate_email, validate_phone

# Верхняя граница задаётся настройкой MAX_GUEST_NUMBER в сервисе.
GuestNumber = Annotated[int, Field(ge=1)]
PersonName = Annotated[str, Field(min_length=1, max_length=NAME_MAX_LENGTH)]


class ReservationCreate(BaseModel):
    """Заявка на бронирование столов."""

    first_name: PersonName
    last_name: PersonName
    email: Optional[str] = None
    phone: Optional[str] = None
    guest_number: GuestNumber
    reservation_date: date
    reservation_time: time
    channel: TableChannel = TableChannel.ONLINE
    note: Optional[Annotated[str, Field(max_length=NOTE_MAX_LENGTH)]] = None

    @field_validator('first_name', 'last_name', mode='before')
    @classmethod
    def normalize_name(cls, value: Optional[str]) -> Optional[str]:
        """Удаляет лишние пробелы в имени."""
        return normalize_text(value, 'Имя')

    @field_validator('note', mode='before')
    @classmethod
    def normalize_note(cls, value: Optional[str]) -> Optional[str]:
        """Очищает комментарий от лишних пробелов."""
        return normalize_text(value, 'Комментарий')

    @field_validator('email')
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        """Проверяет email гостя."""
        return validate_email(value)

    @field_validator('phone')
    @classmethod
    def check_phone(cls, value: Optional[str]) -> Optional[str]:
        """Проверяет телефон гостя."""
        return validate_phone(value)

    @field_validator('reservation_time')
    @classmethod
    def drop_seconds(cls, value: time) -> time:
        """Слоты бронирования задаются с точностью до минуты."""
        return value.replace(second=0, microsecond=0, tzinfo=None)

    def requester_fields(self) -> dict[str, Optional[str]]:
        """Поля гостя, которые сохраняются без обработки движком."""
        return self.model_dump(
            include={'first_name', 'last_name', 'email', 'phone', 'note'},
        )


class AvailabilityQuery(BaseModel):
    """Параметры проверки свободных столов."""

    reservation_date: date
    reservation_time: time
    guest_number: GuestNumber
    channel: TableChannel = TableChannel.OFFLINE


class AssignedTableInfo(BaseModel):
    """Стол, назначенный бронированию."""

    id: UUID
    number: int
    capacity: int
    channel: TableChannel

    model_config = ConfigDict(from_attributes=True)


class AssignedStaffInfo(BaseModel):
    """Сотрудник бронирования и столы, которые он обслуживает."""

    staff_id: UUID
    name: str
    role: StaffRole
    assigned_table_ids: list[UUID]


class ReservationResult(BaseModel):
    """Результат успешного бронирования."""

    reservation_id: UUID
    status: ReservationStatus
    channel: TableChannel
    guest_number: int
    reserved_from: datetime
    reserved_to: datetime
    assigned_tables: list[AssignedTableInfo]
    total_assigned_capacity: int
    assigned_staff: list[AssignedStaffInfo]
    message: str


class TierQuotaInfo(BaseModel):
    """Состояние квоты яруса."""

    quota: Optional[int]
    used: int
    remaining: Optional[int]


class AvailabilityInfo(BaseModel):
    """Свободные столы на запрошенный слот."""

    reservation_date: date
    reservation_time: time
    channel: TableChannel
    guest_number: int
    channel_shift: bool
    tables: list[AssignedTableInfo]
    suggested_tables: list[AssignedTableInfo]
    quotas: dict[str, TierQuotaInfo]


class StaffAssignmentInfo(BaseModel):
    """Назначение персонала на стол."""

    id: UUID
    table_id: UUID
    assignment_date: date
    assignment_time: time
    waiter_id: UUID
    manager_id: UUID
    cleaner_id: UUID

    model_config = ConfigDict(from_attributes=True)


class ReservationInfo(BaseModel):
    """Полная схема бронирования со столами и персоналом."""

    id: UUID
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    note: Optional[str] = None
    guest_number: int
    reservation_date: date
    reservation_time: time
    reserved_from: datetime
    reserved_to: datetime
    channel: TableChannel
    status: ReservationStatus
    tables: list[AssignedTableInfo]
    staff_assignments: list[StaffAssignmentInfo]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
