# src/core/__init__.py
"""
Доменный слой (Core Domain).
Жизненный цикл заказов на вывоз, подписки и зоны обслуживания.
"""

from src.core.users import User
from src.core.orders import AssignmentCoordinator, Order, OrderService, TimeSlotValidator
from src.core.subscriptions import Subscription, SubscriptionQuotaLedger
from src.core.zones import ServiceZone, ServiceZoneRegistry
from src.core.geo import GeofenceValidator, GeocodingClient

__all__ = [
    "User",
    "Order",
    "OrderService",
    "AssignmentCoordinator",
    "TimeSlotValidator",
    "Subscription",
    "SubscriptionQuotaLedger",
    "ServiceZone",
    "ServiceZoneRegistry",
    "GeofenceValidator",
    "GeocodingClient",
]
