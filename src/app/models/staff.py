from sqlalchemy import String
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base
from app.utils.enums import StaffRole


class Staff(Base):
    """Таблица персонала зала."""

    first_name: Mapped[str] = mapped_column(String(200), nullable=False)
    last_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[StaffRole] = mapped_column(
        ENUM(StaffRole, name='staff_role', create_type=True),
        nullable=False,
        index=True,
    )

    @property
    def full_name(self) -> str:
        """Имя и фамилия сотрудника."""
        return f'{self.first_name} {self.last_name}'
