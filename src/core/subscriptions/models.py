# src/core/subscriptions/models.py
"""
Модели подписок на вывоз.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from src.common.constants import SubscriptionStatus


class SubscriptionPlan(str, Enum):
    """Тарифы подписки."""
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


@dataclass(frozen=True)
class PlanTerms:
    """Условия тарифа."""
    total_orders: int
    duration_days: int
    price: Decimal


PLAN_TERMS: dict[SubscriptionPlan, PlanTerms] = {
    SubscriptionPlan.WEEKLY: PlanTerms(total_orders=7, duration_days=14, price=Decimal("690")),
    SubscriptionPlan.MONTHLY: PlanTerms(total_orders=15, duration_days=30, price=Decimal("999")),
    SubscriptionPlan.QUARTERLY: PlanTerms(total_orders=45, duration_days=90, price=Decimal("2790")),
    SubscriptionPlan.YEARLY: PlanTerms(total_orders=182, duration_days=365, price=Decimal("9990")),
}


class Subscription(BaseModel):
    """Подписка клиента с квотой вывозов."""

    id: int = Field(..., description="ID подписки")
    user_id: int = Field(..., description="ID владельца")
    plan: SubscriptionPlan = Field(..., description="Тариф")
    start_date: date = Field(..., description="Дата начала")
    end_date: date = Field(..., description="Дата окончания (включительно)")
    price: Decimal = Field(Decimal("0"), description="Стоимость")
    status: SubscriptionStatus = Field(SubscriptionStatus.ACTIVE, description="Статус")
    total_allowed_orders: int = Field(..., ge=0, description="Всего вывозов")
    used_orders: int = Field(0, ge=0, description="Использовано вывозов")
    created_at: Optional[datetime] = Field(None, description="Время создания")

    class Config:
        from_attributes = True

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE

    @property
    def has_available_orders(self) -> bool:
        """Есть ли неиспользованные вывозы у активной подписки."""
        return self.is_active and self.used_orders < self.total_allowed_orders

    @property
    def remaining_orders(self) -> int:
        return max(0, self.total_allowed_orders - self.used_orders)

    def is_expired(self, today: date) -> bool:
        """Истекла ли подписка на дату today."""
        return self.end_date < today
