# src/core/orders/models.py
"""
Модели данных заказов на вывоз.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.common.constants import COURIER_ACTIVE_STATUSES, TERMINAL_STATUSES, OrderStatus


class Order(BaseModel):
    """Модель заказа на вывоз."""

    id: int = Field(..., description="ID заказа")
    client_id: int = Field(..., description="ID клиента")
    courier_id: Optional[int] = Field(None, description="ID курьера")
    subscription_id: Optional[int] = Field(None, description="ID подписки")

    # Адрес и точка, прошедшая проверку зоны
    address: str = Field(..., description="Адрес вывоза")
    latitude: float = Field(..., description="Широта")
    longitude: float = Field(..., description="Долгота")

    pickup_time: datetime = Field(..., description="Время вывоза")
    comment: Optional[str] = Field(None, description="Комментарий клиента")

    status: OrderStatus = Field(OrderStatus.PUBLISHED, description="Статус заказа")
    quota_released: bool = Field(False, description="Вывоз по подписке уже возвращён")

    created_at: Optional[datetime] = Field(None, description="Время создания")
    updated_at: Optional[datetime] = Field(None, description="Время изменения")

    class Config:
        from_attributes = True

    @property
    def is_terminal(self) -> bool:
        """Финальный ли статус."""
        return self.status in TERMINAL_STATUSES

    @property
    def is_assigned(self) -> bool:
        return self.courier_id is not None

    @property
    def is_available(self) -> bool:
        """Может ли курьер взять заказ."""
        return self.status == OrderStatus.PUBLISHED and self.courier_id is None

    @property
    def is_active_for_courier(self) -> bool:
        return self.status in COURIER_ACTIVE_STATUSES


class OrderStats(BaseModel):
    """Счётчики заказов для экрана курьера."""

    available_count: int = Field(0, ge=0, description="Доступные заказы")
    active_count: int = Field(0, ge=0, description="Заказы в работе у курьера")
