from .healthcheck import router as healthcheck_router
from .reservation import router as reservation_router
from .staff import router as staff_router
from .table import router as table_router

__all__ = [
    'reservation_router',
    'table_router',
    'staff_router',
    'healthcheck_router',
]

routers = [
    reservation_router,
    table_router,
    staff_router,
    healthcheck_router,
]
