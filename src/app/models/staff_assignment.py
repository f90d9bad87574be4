import uuid
from datetime import date, time
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db import Base

if TYPE_CHECKING:
    from app.models import Reservation


class StaffAssignment(Base):
    """Таблица назначений персонала на стол в слоте."""

    reservation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('reservation.id', ondelete='CASCADE'),
        index=True,
        nullable=False,
    )
    table_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('table.id', ondelete='RESTRICT'),
        nullable=False,
    )
    assignment_date: Mapped[date] = mapped_column(Date, nullable=False)
    assignment_time: Mapped[time] = mapped_column(Time, nullable=False)
    waiter_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('staff.id', ondelete='RESTRICT'),
        nullable=False,
    )
    manager_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('staff.id', ondelete='RESTRICT'),
        nullable=False,
    )
    cleaner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('staff.id', ondelete='RESTRICT'),
        nullable=False,
    )

    reservation: Mapped['Reservation'] = relationship(
        back_populates='staff_assignments',
        lazy='selectin',
    )

    __table_args__ = (
        UniqueConstraint(
            'table_id',
            'assignment_date',
            'assignment_time',
            name='uq_staff_assignment_slot',
        ),
        Index(
            'ix_staff_assignment_slot',
            'assignment_date',
            'assignment_time',
        ),
    )
