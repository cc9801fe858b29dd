# src/core/orders/time_slots.py
"""
Проверка времени вывоза: минимальный запас, горизонт и интервалы.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from src.common.constants import PICKUP_SLOTS
from src.common.exceptions import (
    PickupOutsideSlotError,
    PickupTimeMissingError,
    PickupTooFarError,
    PickupTooSoonError,
)


def _format_slots() -> str:
    return ", ".join(f"{start:%H:%M}-{end:%H:%M}" for start, end in PICKUP_SLOTS)


class TimeSlotValidator:
    """
    Проверяет время вывоза относительно текущего момента.
    Интервалы сравниваются в часовом поясе города обслуживания.
    """

    def __init__(
        self,
        tz: str | ZoneInfo | None = None,
        min_lead_minutes: int | None = None,
        max_horizon_days: int | None = None,
    ) -> None:
        """
        Args:
            tz: Часовой пояс города (из конфига, если None)
            min_lead_minutes: Минимальный запас до вывоза в минутах
            max_horizon_days: Максимальный горизонт планирования в днях
        """
        if tz is None or min_lead_minutes is None or max_horizon_days is None:
            from src.config import settings
            tz = tz if tz is not None else settings.domain.TIMEZONE
            if min_lead_minutes is None:
                min_lead_minutes = settings.orders.MIN_LEAD_TIME_MINUTES
            if max_horizon_days is None:
                max_horizon_days = settings.orders.MAX_HORIZON_DAYS

        self._tz = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)
        self._min_lead = timedelta(minutes=min_lead_minutes)
        self._max_horizon = timedelta(days=max_horizon_days)

    @property
    def timezone(self) -> ZoneInfo:
        return self._tz

    def validate(self, pickup: Optional[datetime], now: datetime) -> None:
        """
        Raises:
            PickupTimeMissingError: Время не указано или без часового пояса
            PickupTooSoonError: Раньше минимального запаса
            PickupTooFarError: Дальше горизонта
            PickupOutsideSlotError: Вне интервалов вывоза
        """
        if pickup is None:
            raise PickupTimeMissingError("Укажите время вывоза")
        if pickup.tzinfo is None or pickup.utcoffset() is None:
            raise PickupTimeMissingError("Время вывоза должно содержать часовой пояс")

        if pickup < now + self._min_lead:
            hours = self._min_lead.total_seconds() / 3600
            raise PickupTooSoonError(
                f"Время вывоза должно быть не ранее чем через {hours:g} ч"
            )

        if pickup > now + self._max_horizon:
            raise PickupTooFarError(f"Максимальный срок — {self._max_horizon.days} дней")

        local_time = pickup.astimezone(self._tz).time()
        if not any(start <= local_time < end for start, end in PICKUP_SLOTS):
            raise PickupOutsideSlotError(f"Доступные интервалы вывоза: {_format_slots()}")
