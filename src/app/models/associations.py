import uuid

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base


class ReservationTable(Base):
    """Промежуточная таблица для связи между бронированиями и столами."""

    id = None
    reservation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('reservation.id', ondelete='CASCADE'),
        primary_key=True,
    )
    table_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('table.id', ondelete='RESTRICT'),
        primary_key=True,
        index=True,
    )
