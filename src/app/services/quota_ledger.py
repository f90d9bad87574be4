from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional
from uuid import UUID

from app.services.engine_config import Tier
from app.services.time_window import TimeWindow
from app.utils.enums import TableChannel


@dataclass(frozen=True)
class BookedTable:
    """Стол, удерживаемый действующим бронированием."""

    table_id: UUID
    capacity: int
    channel: TableChannel
    reservation_id: UUID
    window: TimeWindow

    @property
    def tier(self) -> Tier:
        """Ярус квоты, к которому относится стол."""
        return Tier(self.capacity, self.channel)


class QuotaLedger:
    """Учёт занятых столов по ярусам квот для заданного интервала.

    Считаются различные столы яруса, удерживаемые бронированиями,
    чей интервал пересекается с запрошенным. Ярус определяется
    собственным каналом стола, поэтому онлайн-столы, отданные офлайн-гостям,
    продолжают расходовать онлайн-квоту.
    """

    def __init__(
        self,
        quotas: Mapping[Tier, int],
        booked: Iterable[BookedTable],
        window: TimeWindow,
    ) -> None:
        """Собирает занятость ярусов по пересекающимся бронированиям."""
        self._quotas = dict(quotas)
        self.window = window
        self._held: dict[Tier, set[UUID]] = defaultdict(set)
        for booked_table in booked:
            if booked_table.window.overlaps(window):
                self._held[booked_table.tier].add(booked_table.table_id)

    def quota(self, tier: Tier) -> Optional[int]:
        """Квота яруса или None, если ярус не ограничен."""
        return self._quotas.get(tier)

    def count(self, tier: Tier) -> int:
        """Количество столов яруса, занятых в интервале."""
        return len(self._held.get(tier, ()))

    def remaining(self, tier: Tier) -> Optional[int]:
        """Остаток квоты яруса; None для неограниченного яруса."""
        quota = self.quota(tier)
        if quota is None:
            return None
        return quota - self.count(tier)

    def is_exhausted(self, tier: Tier) -> bool:
        """True, если квота яруса выбрана полностью."""
        remaining = self.remaining(tier)
        return remaining is not None and remaining <= 0

    def snapshot(self) -> dict[str, dict[str, Optional[int]]]:
        """Состояние ограниченных ярусов для логов и диагностики."""
        return {
            f'{tier.channel.value}:{tier.capacity}': {
                'quota': quota,
                'used': self.count(tier),
                'remaining': self.remaining(tier),
            }
            for tier, quota in sorted(self._quotas.items())
        }
