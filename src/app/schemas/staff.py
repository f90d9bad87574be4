from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import NAME_MAX_LENGTH
from app.schemas.table import TableCreate
from app.utils.enums import StaffRole
from app.utils.validators import normalize_text

StaffName = Annotated[str, Field(min_length=1, max_length=NAME_MAX_LENGTH)]


class StaffCreate(BaseModel):
    """Схема для заведения сотрудника в каталоге."""

    first_name: StaffName
    last_name: StaffName
    role: StaffRole

    @field_validator('first_name', 'last_name', mode='before')
    @classmethod
    def normalize_name(cls, value: str) -> str:
        """Удаляет лишние пробелы в имени."""
        return normalize_text(value, 'Имя сотрудника')


class StaffInfo(BaseModel):
    """Схема сотрудника."""

    id: UUID
    first_name: str
    last_name: str
    role: StaffRole
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CatalogSeed(BaseModel):
    """Содержимое файла начального заполнения каталога."""

    tables: list[TableCreate] = []
    staff: list[StaffCreate] = []

