# src/core/subscriptions/ledger.py
"""
Учёт квоты вывозов по подписке.
Единственное место, где меняется used_orders.
"""

from __future__ import annotations

from typing import Optional

from asyncpg import Connection

from src.common.constants import TypeMsg
from src.common.exceptions import ConflictError, NotFoundError
from src.common.logger import log_info
from src.core.subscriptions.models import Subscription
from src.core.subscriptions.repository import SubscriptionRepository


class SubscriptionQuotaLedger:
    """
    Списание и возврат вывозов.
    Оба метода выполняются в транзакции изменения заказа.
    """

    def __init__(self, repository: Optional[SubscriptionRepository] = None) -> None:
        self._repo = repository or SubscriptionRepository()

    async def debit(self, conn: Connection, subscription: Subscription) -> Subscription:
        """
        Списывает один вывоз.

        Raises:
            ConflictError: Квота исчерпана
        """
        updated = await self._repo.increment_used(conn, subscription.id)
        if updated is None:
            raise ConflictError("Лимит вывозов по подписке исчерпан")

        await log_info(
            f"Списан вывоз по подписке {updated.id}: {updated.used_orders}/{updated.total_allowed_orders}",
            type_msg=TypeMsg.DEBUG,
        )
        return updated

    async def credit(self, conn: Connection, subscription: Subscription) -> Subscription:
        """Возвращает один вывоз (не ниже нуля)."""
        updated = await self._repo.decrement_used(conn, subscription.id)
        if updated is None:
            raise NotFoundError("Подписка не найдена")

        await log_info(
            f"Возвращён вывоз по подписке {updated.id}: {updated.used_orders}/{updated.total_allowed_orders}",
            type_msg=TypeMsg.DEBUG,
        )
        return updated
