# src/core/orders/state_machine.py
"""
Допустимые переходы статусов заказа по ролям.
"""

from __future__ import annotations

from src.common.constants import OrderStatus
from src.common.exceptions import ConflictError


class OrderStateMachine:
    CLIENT_TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
        OrderStatus.PUBLISHED: [OrderStatus.CANCELLED_BY_CUSTOMER],
        OrderStatus.ACCEPTED: [OrderStatus.CANCELLED_BY_CUSTOMER],
    }

    # Принятие заказа (PUBLISHED -> ACCEPTED) идёт через AssignmentCoordinator
    COURIER_TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
        OrderStatus.ACCEPTED: [OrderStatus.ON_THE_WAY, OrderStatus.CANCELLED_BY_COURIER],
        OrderStatus.ON_THE_WAY: [OrderStatus.PICKED_UP, OrderStatus.CANCELLED_BY_COURIER],
        OrderStatus.PICKED_UP: [OrderStatus.COMPLETED],
    }

    COURIER_SETTABLE: frozenset[OrderStatus] = frozenset({
        OrderStatus.ON_THE_WAY,
        OrderStatus.PICKED_UP,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED_BY_COURIER,
    })

    @staticmethod
    def can_client_transition(current: OrderStatus, new: OrderStatus) -> bool:
        return new in OrderStateMachine.CLIENT_TRANSITIONS.get(current, [])

    @staticmethod
    def can_courier_transition(current: OrderStatus, new: OrderStatus) -> bool:
        return new in OrderStateMachine.COURIER_TRANSITIONS.get(current, [])

    @staticmethod
    def is_courier_settable(status: OrderStatus) -> bool:
        return status in OrderStateMachine.COURIER_SETTABLE

    @staticmethod
    def ensure_client_can_cancel(current: OrderStatus) -> None:
        if not OrderStateMachine.can_client_transition(current, OrderStatus.CANCELLED_BY_CUSTOMER):
            raise ConflictError("Нельзя отменить заказ на текущем этапе")

    @staticmethod
    def ensure_courier_transition(current: OrderStatus, new: OrderStatus) -> None:
        if not OrderStateMachine.can_courier_transition(current, new):
            raise ConflictError(
                f"Недопустимый переход статуса: {current.value} -> {new.value}"
            )
