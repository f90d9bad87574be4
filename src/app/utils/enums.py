from enum import Enum


class TableChannel(str, Enum):
    """Enum класс для каналов бронирования столов."""

    ONLINE = 'ONLINE'
    OFFLINE = 'OFFLINE'


class StaffRole(str, Enum):
    """Enum класс для ролей персонала зала."""

    WAITER = 'WAITER'
    MANAGER = 'MANAGER'
    CLEANER = 'CLEANER'


class ReservationStatus(str, Enum):
    """Enum класс для статусов бронирований."""

    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    REJECTED = 'REJECTED'


class ReservationStep(str, Enum):
    """Шаги транзакции бронирования."""

    VALIDATED = 'VALIDATED'
    POOL_BUILT = 'POOL_BUILT'
    TABLES_CHOSEN = 'TABLES_CHOSEN'
    STAFF_ASSIGNED = 'STAFF_ASSIGNED'
    COMMITTED = 'COMMITTED'
    ABORTED = 'ABORTED'


STAFF_ROLES_ORDER = (StaffRole.WAITER, StaffRole.MANAGER, StaffRole.CLEANER)
LIVE_RESERVATION_STATUSES = (
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
)
