# src/core/orders/assignment.py
"""
Принятие заказа курьером.
Из нескольких одновременных попыток побеждает ровно одна.
"""

from __future__ import annotations

from typing import Optional

from src.common.constants import OrderStatus, TypeMsg, UserRole
from src.common.exceptions import AuthorizationError, ConflictError, NotFoundError
from src.common.logger import log_info
from src.core.orders.models import Order
from src.core.orders.repository import OrderRepository
from src.core.users.models import User
from src.infra.database import DatabaseManager, storage_boundary


class AssignmentCoordinator:
    """
    Назначение курьера на заказ.

    Строка заказа блокируется (FOR UPDATE) до конца транзакции,
    затем условный UPDATE проверяет, что заказ всё ещё свободен.
    Заказы с разными ID друг друга не блокируют.
    """

    def __init__(self, db: DatabaseManager, repository: Optional[OrderRepository] = None) -> None:
        self._db = db
        self._repo = repository or OrderRepository(db)

    @storage_boundary("принятие заказа")
    async def accept(self, order_id: int, courier: User) -> Order:
        """
        Курьер берёт заказ в работу.

        Args:
            order_id: ID заказа
            courier: Курьер

        Returns:
            Заказ в статусе ACCEPTED

        Raises:
            AuthorizationError: Вызывающий не курьер
            NotFoundError: Заказ не найден
            ConflictError: Заказ уже принят другим курьером или не опубликован
        """
        if courier.role != UserRole.COURIER:
            raise AuthorizationError("Принять заказ может только курьер")

        async with self._db.transaction() as conn:
            current = await self._repo.get_for_update(conn, order_id)
            if current is None:
                raise NotFoundError("Заказ не найден")

            if current.status != OrderStatus.PUBLISHED or current.courier_id is not None:
                await log_info(
                    f"Курьер {courier.id} не смог принять заказ {order_id}: статус {current.status.value}",
                    type_msg=TypeMsg.DEBUG,
                )
                raise ConflictError("Заказ уже принят другим курьером")

            order = await self._repo.assign_courier_if_unclaimed(conn, order_id, courier.id)
            if order is None:
                raise ConflictError("Заказ уже принят другим курьером")

        await log_info(f"Заказ {order_id} принят курьером {courier.id}", type_msg=TypeMsg.INFO)
        return order
