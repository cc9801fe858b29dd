# src/core/orders/__init__.py
"""
Модуль заказов на вывоз.
"""

from src.core.orders.assignment import AssignmentCoordinator
from src.core.orders.models import Order, OrderStats
from src.core.orders.repository import OrderRepository
from src.core.orders.service import OrderService
from src.core.orders.state_machine import OrderStateMachine
from src.core.orders.time_slots import TimeSlotValidator

__all__ = [
    "Order",
    "OrderStats",
    "OrderRepository",
    "OrderService",
    "OrderStateMachine",
    "TimeSlotValidator",
    "AssignmentCoordinator",
]
