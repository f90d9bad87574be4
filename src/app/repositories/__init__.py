from .base import CRUDBase
from .reservation import (
    ReservationRepository,
    SQLAlchemyReservationStore,
    reservation_repository,
    reservation_unit_of_work,
)
from .staff import StaffRepository, staff_repository
from .table import TableRepository, table_repository

__all__ = [
    'CRUDBase',
    'TableRepository',
    'table_repository',
    'StaffRepository',
    'staff_repository',
    'ReservationRepository',
    'reservation_repository',
    'SQLAlchemyReservationStore',
    'reservation_unit_of_work',
]
