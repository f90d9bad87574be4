from dataclasses import dataclass
from datetime import datetime, timedelta
from itertools import groupby
from typing import Iterable
from uuid import UUID

from app.services.engine_config import Tier
from app.services.quota_ledger import BookedTable, QuotaLedger
from app.services.time_window import TimeWindow
from app.utils.enums import TableChannel


@dataclass(frozen=True)
class TableCandidate:
    """Стол каталога в виде, удобном для подбора комбинаций."""

    id: UUID
    number: int
    capacity: int
    channel: TableChannel

    @property
    def tier(self) -> Tier:
        """Ярус квоты стола."""
        return Tier(self.capacity, self.channel)


def channel_shift_applies(
    channel: TableChannel,
    window: TimeWindow,
    now: datetime,
    lead: timedelta,
) -> bool:
    """Проверяет, открыт ли перевод свободных онлайн-столов в зал.

    Перевод действует только для офлайн-заявок на текущий день,
    когда до начала слота осталось не больше ``lead``.
    """
    if channel != TableChannel.OFFLINE:
        return False
    if window.start.date() != now.date():
        return False
    return now >= window.start - lead


class TablePool:
    """Представление каталога столов, свободных в заданном интервале."""

    def __init__(
        self,
        tables: Iterable[TableCandidate],
        booked: Iterable[BookedTable],
    ) -> None:
        """Принимает каталог столов и столы действующих бронирований."""
        self._tables = list(tables)
        self._booked = list(booked)

    def busy_table_ids(self, window: TimeWindow) -> set[UUID]:
        """Столы, занятые бронированиями, пересекающимися с интервалом."""
        return {
            booked.table_id
            for booked in self._booked
            if booked.window.overlaps(window)
        }

    def free_tables(
        self,
        window: TimeWindow,
        channels: Iterable[TableChannel],
    ) -> list[TableCandidate]:
        """Свободные столы указанных каналов без учёта квот."""
        busy = self.busy_table_ids(window)
        allowed = set(channels)
        return sorted(
            (
                table
                for table in self._tables
                if table.channel in allowed and table.id not in busy
            ),
            key=lambda table: (table.capacity, table.number),
        )

    def build(
        self,
        channel: TableChannel,
        window: TimeWindow,
        ledger: QuotaLedger,
        shifted: bool = False,
    ) -> list[TableCandidate]:
        """Формирует список кандидатов для поиска комбинации.

        Args:
            channel: Канал заявки.
            window: Запрошенный интервал.
            ledger: Учёт квот для этого же интервала.
            shifted: Добавлять ли свободные онлайн-столы к офлайн-пулу.

        Returns:
            list[TableCandidate]: Кандидаты по возрастанию вместимости;
                ярус с квотой даёт не больше ``remaining`` столов, выбранный
                ярус пропускается целиком.

        """
        channels = {channel}
        if shifted:
            channels.add(TableChannel.ONLINE)
        candidates: list[TableCandidate] = []
        free = sorted(
            self.free_tables(window, channels),
            key=lambda table: (table.tier, table.number),
        )
        for tier, tier_tables in groupby(free, key=lambda table: table.tier):
            tier_tables = list(tier_tables)
            remaining = ledger.remaining(tier)
            if remaining is None:
                candidates.extend(tier_tables)
            elif remaining > 0:
                candidates.extend(tier_tables[:remaining])
        return sorted(
            candidates,
            key=lambda table: (table.capacity, table.number),
        )
