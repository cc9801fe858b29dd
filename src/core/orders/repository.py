# src/core/orders/repository.py
"""
Репозиторий для работы с заказами в БД.
Методы с параметром conn выполняются в транзакции вызывающего,
ошибки БД пробрасываются.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from asyncpg import Connection

from src.common.constants import COURIER_ACTIVE_STATUSES, OrderStatus
from src.core.orders.models import Order
from src.infra.database import DatabaseManager

_COLUMNS = """
    id, client_id, courier_id, subscription_id, address, latitude, longitude,
    pickup_time, comment, status, quota_released, created_at, updated_at
"""

_ACTIVE_STATUS_VALUES = [status.value for status in COURIER_ACTIVE_STATUSES]


class OrderRepository:
    """Репозиторий заказов."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Инициализация репозитория.

        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    # =========================================================================
    # Запись (в транзакции)
    # =========================================================================

    async def insert(
        self,
        conn: Connection,
        *,
        client_id: int,
        address: str,
        latitude: float,
        longitude: float,
        pickup_time: datetime,
        comment: Optional[str],
        subscription_id: Optional[int],
    ) -> Order:
        """Создаёт заказ в статусе PUBLISHED."""
        row = await conn.fetchrow(
            f"""
            INSERT INTO orders (
                client_id, subscription_id, address, latitude, longitude,
                pickup_time, comment, status
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING {_COLUMNS}
            """,
            client_id,
            subscription_id,
            address,
            latitude,
            longitude,
            pickup_time,
            comment,
            OrderStatus.PUBLISHED.value,
        )
        return self._row_to_order(row)

    async def get_for_update(self, conn: Connection, order_id: int) -> Optional[Order]:
        """Читает заказ с блокировкой строки."""
        row = await conn.fetchrow(
            f"SELECT {_COLUMNS} FROM orders WHERE id = $1 FOR UPDATE",
            order_id,
        )
        return self._row_to_order(row) if row else None

    async def get_owned_by_client_for_update(
        self,
        conn: Connection,
        order_id: int,
        client_id: int,
    ) -> Optional[Order]:
        row = await conn.fetchrow(
            f"SELECT {_COLUMNS} FROM orders WHERE id = $1 AND client_id = $2 FOR UPDATE",
            order_id,
            client_id,
        )
        return self._row_to_order(row) if row else None

    async def get_assigned_to_courier_for_update(
        self,
        conn: Connection,
        order_id: int,
        courier_id: int,
    ) -> Optional[Order]:
        row = await conn.fetchrow(
            f"SELECT {_COLUMNS} FROM orders WHERE id = $1 AND courier_id = $2 FOR UPDATE",
            order_id,
            courier_id,
        )
        return self._row_to_order(row) if row else None

    async def assign_courier_if_unclaimed(
        self,
        conn: Connection,
        order_id: int,
        courier_id: int,
    ) -> Optional[Order]:
        """
        Назначает курьера, только если заказ всё ещё свободен.

        Returns:
            Обновлённый заказ или None, если заказ уже занят
        """
        row = await conn.fetchrow(
            f"""
            UPDATE orders
            SET courier_id = $2, status = $3, updated_at = NOW()
            WHERE id = $1 AND status = $4 AND courier_id IS NULL
            RETURNING {_COLUMNS}
            """,
            order_id,
            courier_id,
            OrderStatus.ACCEPTED.value,
            OrderStatus.PUBLISHED.value,
        )
        return self._row_to_order(row) if row else None

    async def update_status(
        self,
        conn: Connection,
        order_id: int,
        status: OrderStatus,
        *,
        clear_courier: bool = False,
    ) -> Order:
        """Перезаписывает статус заказа."""
        if clear_courier:
            query = f"""
                UPDATE orders
                SET status = $2, courier_id = NULL, updated_at = NOW()
                WHERE id = $1
                RETURNING {_COLUMNS}
            """
        else:
            query = f"""
                UPDATE orders
                SET status = $2, updated_at = NOW()
                WHERE id = $1
                RETURNING {_COLUMNS}
            """
        row = await conn.fetchrow(query, order_id, status.value)
        return self._row_to_order(row)

    async def mark_quota_released(self, conn: Connection, order_id: int) -> None:
        await conn.execute(
            "UPDATE orders SET quota_released = TRUE, updated_at = NOW() WHERE id = $1",
            order_id,
        )

    # =========================================================================
    # Чтение
    # =========================================================================

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """
        Получает заказ по ID.

        Args:
            order_id: ID заказа

        Returns:
            Заказ или None
        """
        row = await self._db.fetchrow(
            f"SELECT {_COLUMNS} FROM orders WHERE id = $1",
            order_id,
        )
        return self._row_to_order(row) if row else None

    async def list_by_client(self, client_id: int) -> list[Order]:
        """Заказы клиента, новые первыми."""
        rows = await self._db.fetch(
            f"""
            SELECT {_COLUMNS} FROM orders
            WHERE client_id = $1
            ORDER BY created_at DESC, id DESC
            """,
            client_id,
        )
        return [self._row_to_order(row) for row in rows]

    async def list_available(self) -> list[Order]:
        """Опубликованные заказы без курьера."""
        rows = await self._db.fetch(
            f"""
            SELECT {_COLUMNS} FROM orders
            WHERE status = $1 AND courier_id IS NULL
            ORDER BY created_at DESC, id DESC
            """,
            OrderStatus.PUBLISHED.value,
        )
        return [self._row_to_order(row) for row in rows]

    async def list_active_by_courier(self, courier_id: int) -> list[Order]:
        """Заказы в работе у курьера."""
        rows = await self._db.fetch(
            f"""
            SELECT {_COLUMNS} FROM orders
            WHERE courier_id = $1 AND status = ANY($2::varchar[])
            ORDER BY pickup_time ASC, id ASC
            """,
            courier_id,
            _ACTIVE_STATUS_VALUES,
        )
        return [self._row_to_order(row) for row in rows]

    async def count_available(self) -> int:
        value = await self._db.fetchval(
            "SELECT COUNT(*) FROM orders WHERE status = $1 AND courier_id IS NULL",
            OrderStatus.PUBLISHED.value,
        )
        return int(value or 0)

    async def count_active_by_courier(self, courier_id: int) -> int:
        value = await self._db.fetchval(
            "SELECT COUNT(*) FROM orders WHERE courier_id = $1 AND status = ANY($2::varchar[])",
            courier_id,
            _ACTIVE_STATUS_VALUES,
        )
        return int(value or 0)

    async def list_all(self) -> list[Order]:
        rows = await self._db.fetch(
            f"SELECT {_COLUMNS} FROM orders ORDER BY created_at DESC, id DESC"
        )
        return [self._row_to_order(row) for row in rows]

    def _row_to_order(self, row: Any) -> Order:
        """Конвертирует строку БД в модель Order."""
        return Order(
            id=row["id"],
            client_id=row["client_id"],
            courier_id=row["courier_id"],
            subscription_id=row["subscription_id"],
            address=row["address"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            pickup_time=row["pickup_time"],
            comment=row["comment"],
            status=OrderStatus(row["status"]),
            quota_released=row["quota_released"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
