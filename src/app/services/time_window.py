from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class TimeWindow:
    """Полуоткрытый интервал времени ``[start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        """Проверяет, что начало интервала раньше окончания."""
        if self.start >= self.end:
            raise ValueError('Начало интервала должно быть раньше окончания')

    @classmethod
    def from_start(cls, start: datetime, duration: timedelta) -> 'TimeWindow':
        """Создаёт интервал заданной длительности от момента начала."""
        return cls(start=start, end=start + duration)

    def overlaps(self, other: 'TimeWindow') -> bool:
        """Проверяет пересечение; касание границами пересечением не считается."""
        return overlaps(self, other)

    @property
    def slot_date(self) -> date:
        """Дата слота для учёта нагрузки персонала."""
        return self.start.date()

    @property
    def slot_time(self) -> time:
        """Время слота для учёта нагрузки персонала."""
        return self.start.time().replace(tzinfo=None)

    def dates(self) -> list[date]:
        """Возвращает все календарные даты, которые затрагивает интервал."""
        last = (self.end - timedelta(microseconds=1)).date()
        days = (last - self.start.date()).days
        return [self.start.date() + timedelta(days=i) for i in range(days + 1)]


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    """Пересечение полуоткрытых интервалов."""
    return a.start < b.end and a.end > b.start
