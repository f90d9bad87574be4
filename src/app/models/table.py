from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base
from app.utils.enums import TableChannel


class Table(Base):
    """Таблица столиков ресторана."""

    number: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    channel: Mapped[TableChannel] = mapped_column(
        ENUM(TableChannel, name='table_channel', create_type=True),
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint('capacity > 0', name='ck_table_capacity_positive'),
        CheckConstraint('number > 0', name='ck_table_number_positive'),
    )
