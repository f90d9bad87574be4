from .common import ErrorResponse, ReservationErrorResponse
from .reservation import (
    AssignedStaffInfo,
    AssignedTableInfo,
    AvailabilityInfo,
    AvailabilityQuery,
    ReservationCreate,
    ReservationInfo,
    ReservationResult,
    StaffAssignmentInfo,
    TierQuotaInfo,
)
from .staff import CatalogSeed, StaffCreate, StaffInfo
from .table import TableCreate, TableInfo, TableShortInfo

__all__ = [
    'ErrorResponse',
    'ReservationErrorResponse',
    'ReservationCreate',
    'ReservationResult',
    'ReservationInfo',
    'AvailabilityQuery',
    'AvailabilityInfo',
    'AssignedTableInfo',
    'AssignedStaffInfo',
    'StaffAssignmentInfo',
    'TierQuotaInfo',
    'TableCreate',
    'TableShortInfo',
    'TableInfo',
    'StaffCreate',
    'StaffInfo',
    'CatalogSeed',
]
