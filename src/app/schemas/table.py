from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.types import StringConstraints

from app.utils.enums import TableChannel
from app.utils.validators import normalize_text

DescriptionConstraint = StringConstraints(
    strip_whitespace=True,
    max_length=300,
)
PositiveNumber = Field(ge=1)


class TableBase(BaseModel):
    """Базовая схема для стола с общими полями."""

    number: Annotated[int, PositiveNumber]
    capacity: Annotated[int, PositiveNumber]
    channel: TableChannel
    description: Optional[Annotated[str, DescriptionConstraint]] = None

    @field_validator('description', mode='before')
    @classmethod
    def normalize_description(cls, value: Optional[str]) -> Optional[str]:
        """Удаляет лишние пробелы и приводит пустые строки к None."""
        return normalize_text(value, 'Описание стола')


class TableCreate(TableBase):
    """Схема для заведения стола в каталоге."""


class TableShortInfo(BaseModel):
    """Сокращенная схема стола для вложенных объектов."""

    id: UUID
    number: int
    capacity: int
    channel: TableChannel

    model_config = ConfigDict(from_attributes=True)


class TableInfo(TableShortInfo):
    """Полная схема стола."""

    description: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
