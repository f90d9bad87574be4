from dataclasses import dataclass, field
from datetime import timedelta, tzinfo
from typing import Mapping, NamedTuple
from zoneinfo import ZoneInfo

from app.core.constants import (
    DEFAULT_CHANNEL_SHIFT_LEAD_MINUTES,
    DEFAULT_MAX_GUEST_NUMBER,
    DEFAULT_MAX_TABLES_PER_COMBINATION,
    DEFAULT_MAX_TABLES_PER_STAFF,
    DEFAULT_SLOT_DURATION_MINUTES,
    DEFAULT_SMALL_PARTY_TIER_CAPACITY,
)
from app.utils.enums import TableChannel


class Tier(NamedTuple):
    """Ярус квоты: вместимость стола и канал бронирования."""

    capacity: int
    channel: TableChannel


@dataclass(frozen=True)
class EngineConfig:
    """Конфигурация движка подбора столов и персонала.

    Передаётся в сервис при создании, поэтому квоты и пороги
    настраиваются окружением, а не литералами в коде.
    """

    quotas: Mapping[Tier, int] = field(default_factory=dict)
    max_tables_per_combination: int = DEFAULT_MAX_TABLES_PER_COMBINATION
    max_tables_per_staff: int = DEFAULT_MAX_TABLES_PER_STAFF
    channel_shift_lead: timedelta = timedelta(
        minutes=DEFAULT_CHANNEL_SHIFT_LEAD_MINUTES,
    )
    slot_duration: timedelta = timedelta(
        minutes=DEFAULT_SLOT_DURATION_MINUTES,
    )
    small_party_tier_capacity: int = DEFAULT_SMALL_PARTY_TIER_CAPACITY
    max_guest_number: int = DEFAULT_MAX_GUEST_NUMBER
    timezone: tzinfo = ZoneInfo('UTC')

    def __post_init__(self) -> None:
        """Проверяет согласованность значений конфигурации."""
        if self.max_tables_per_combination < 1:
            raise ValueError(
                'Максимум столов в комбинации должен быть больше нуля',
            )
        if self.max_tables_per_staff < 1:
            raise ValueError(
                'Максимум столов на сотрудника должен быть больше нуля',
            )
        if self.slot_duration <= timedelta(0):
            raise ValueError('Длительность слота должна быть положительной')
        if self.channel_shift_lead < timedelta(0):
            raise ValueError('Порог перевода столов не может быть отрицательным')
        for tier, quota in self.quotas.items():
            if tier.capacity < 1 or quota < 0:
                raise ValueError(f'Некорректная квота для яруса {tier}')

    @classmethod
    def from_mapping(
        cls,
        quotas: Mapping[TableChannel | str, Mapping[int | str, int]],
        *,
        max_tables_per_combination: int = DEFAULT_MAX_TABLES_PER_COMBINATION,
        max_tables_per_staff: int = DEFAULT_MAX_TABLES_PER_STAFF,
        channel_shift_lead_minutes: int = DEFAULT_CHANNEL_SHIFT_LEAD_MINUTES,
        slot_duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES,
        small_party_tier_capacity: int = DEFAULT_SMALL_PARTY_TIER_CAPACITY,
        max_guest_number: int = DEFAULT_MAX_GUEST_NUMBER,
        timezone: str = 'UTC',
    ) -> 'EngineConfig':
        """Создаёт конфигурацию из вложенного словаря канал -> ярус -> квота.

        Пример: ``{'ONLINE': {2: 3, 4: 6, 6: 2}}``.
        """
        tiers = {
            Tier(int(capacity), TableChannel(channel)): int(quota)
            for channel, per_capacity in quotas.items()
            for capacity, quota in per_capacity.items()
        }
        return cls(
            quotas=tiers,
            max_tables_per_combination=max_tables_per_combination,
            max_tables_per_staff=max_tables_per_staff,
            channel_shift_lead=timedelta(minutes=channel_shift_lead_minutes),
            slot_duration=timedelta(minutes=slot_duration_minutes),
            small_party_tier_capacity=small_party_tier_capacity,
            max_guest_number=max_guest_number,
            timezone=ZoneInfo(timezone),
        )
