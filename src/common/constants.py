# src/common/constants.py
"""
Общие константы и перечисления.
"""

from datetime import time
from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class UserRole(str, Enum):
    """Роли пользователей."""
    CLIENT = "CLIENT"
    COURIER = "COURIER"
    ADMIN = "ADMIN"


class OrderStatus(str, Enum):
    """Статусы заказа на вывоз."""
    PUBLISHED = "PUBLISHED"
    ACCEPTED = "ACCEPTED"
    ON_THE_WAY = "ON_THE_WAY"
    PICKED_UP = "PICKED_UP"
    COMPLETED = "COMPLETED"
    CANCELLED_BY_CUSTOMER = "CANCELLED_BY_CUSTOMER"
    CANCELLED_BY_COURIER = "CANCELLED_BY_COURIER"


class SubscriptionStatus(str, Enum):
    """Статусы подписки."""
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CANCELED = "CANCELED"


# Финальные статусы: переходы из них запрещены
TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset({
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED_BY_CUSTOMER,
    OrderStatus.CANCELLED_BY_COURIER,
})

# Заказы, которые курьер сейчас выполняет
COURIER_ACTIVE_STATUSES: tuple[OrderStatus, ...] = (
    OrderStatus.ACCEPTED,
    OrderStatus.ON_THE_WAY,
    OrderStatus.PICKED_UP,
)

# Интервалы вывоза: начало включительно, конец не включительно
PICKUP_SLOTS: tuple[tuple[time, time], ...] = (
    (time(8, 0), time(11, 0)),
    (time(13, 0), time(16, 0)),
    (time(19, 0), time(21, 0)),
)

# Допуск при сравнении координат первой и последней вершины зоны
ZONE_CLOSURE_TOLERANCE: float = 1e-9

# Рёбра с почти равной широтой считаются горизонтальными
HORIZONTAL_EDGE_EPSILON: float = 1e-10
