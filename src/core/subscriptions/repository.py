# src/core/subscriptions/repository.py
"""
Репозиторий подписок.
Все методы работают в транзакции вызывающего.
"""

from __future__ import annotations

from typing import Any, Optional

from asyncpg import Connection

from src.core.subscriptions.models import Subscription

_COLUMNS = """
    id, user_id, plan, start_date, end_date, price, status,
    total_allowed_orders, used_orders, created_at
"""


class SubscriptionRepository:
    """Доступ к таблице subscriptions. Ошибки БД пробрасываются."""

    async def get_for_update(self, conn: Connection, subscription_id: int) -> Optional[Subscription]:
        """Читает подписку с блокировкой строки до конца транзакции."""
        row = await conn.fetchrow(
            f"SELECT {_COLUMNS} FROM subscriptions WHERE id = $1 FOR UPDATE",
            subscription_id,
        )
        return self._row_to_subscription(row) if row else None

    async def increment_used(self, conn: Connection, subscription_id: int) -> Optional[Subscription]:
        """
        Списывает один вывоз, если квота не исчерпана.

        Returns:
            Обновлённая подписка или None, если квота исчерпана
        """
        row = await conn.fetchrow(
            f"""
            UPDATE subscriptions
            SET used_orders = used_orders + 1
            WHERE id = $1 AND used_orders < total_allowed_orders
            RETURNING {_COLUMNS}
            """,
            subscription_id,
        )
        return self._row_to_subscription(row) if row else None

    async def decrement_used(self, conn: Connection, subscription_id: int) -> Optional[Subscription]:
        """Возвращает один вывоз, счётчик не опускается ниже нуля."""
        row = await conn.fetchrow(
            f"""
            UPDATE subscriptions
            SET used_orders = GREATEST(used_orders - 1, 0)
            WHERE id = $1
            RETURNING {_COLUMNS}
            """,
            subscription_id,
        )
        return self._row_to_subscription(row) if row else None

    @staticmethod
    def _row_to_subscription(row: Any) -> Subscription:
        return Subscription(
            id=row["id"],
            user_id=row["user_id"],
            plan=row["plan"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            price=row["price"],
            status=row["status"],
            total_allowed_orders=row["total_allowed_orders"],
            used_orders=row["used_orders"],
            created_at=row["created_at"],
        )
