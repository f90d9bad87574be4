from .associations import ReservationTable
from .reservation import Reservation
from .staff import Staff
from .staff_assignment import StaffAssignment
from .table import Table

__all__ = [
    'Table',
    'Staff',
    'Reservation',
    'ReservationTable',
    'StaffAssignment',
]
