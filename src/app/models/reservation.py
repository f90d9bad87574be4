from datetime import date, datetime, time
from typing import TYPE_CHECKING, List

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db import Base
from app.utils.enums import ReservationStatus, TableChannel

if TYPE_CHECKING:
    from app.models import StaffAssignment, Table


class Reservation(Base):
    """Таблица бронирований столов."""

    first_name: Mapped[str] = mapped_column(String(200), nullable=False)
    last_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    guest_number: Mapped[int] = mapped_column(Integer, nullable=False)
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False)
    reservation_time: Mapped[time] = mapped_column(Time, nullable=False)
    reserved_from: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    reserved_to: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    channel: Mapped[TableChannel] = mapped_column(
        ENUM(
            TableChannel,
            name='table_channel',
            create_type=False,
        ),
        nullable=False,
    )
    status: Mapped[ReservationStatus] = mapped_column(
        ENUM(ReservationStatus, name='reservation_status', create_type=True),
        nullable=False,
        server_default=ReservationStatus.PENDING.value,
    )

    tables: Mapped[List['Table']] = relationship(
        'Table',
        secondary='reservationtable',
        primaryjoin='Reservation.id == foreign(ReservationTable.reservation_id)',
        secondaryjoin='Table.id == foreign(ReservationTable.table_id)',
        order_by='Table.number',
        viewonly=True,
        lazy='selectin',
    )
    staff_assignments: Mapped[List['StaffAssignment']] = relationship(
        back_populates='reservation',
        lazy='selectin',
    )

    __table_args__ = (
        CheckConstraint('guest_number > 0', name='ck_reservation_guests'),
        CheckConstraint(
            'reserved_from < reserved_to',
            name='ck_reservation_interval',
        ),
        Index('ix_reservation_window', 'reserved_from', 'reserved_to'),
    )
