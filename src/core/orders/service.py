# src/core/orders/service.py
"""
Сервис для работы с заказами.
Управляет жизненным циклом заказа на вывоз: создание, отмена,
смена статуса курьером и администратором.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from asyncpg import Connection

from src.common.constants import OrderStatus, TypeMsg, UserRole
from src.common.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PickupTimeMissingError,
    ValidationError,
    ZoneUnavailableError,
)
from src.common.logger import log_info
from src.core.geo.polygon import GeofenceValidator
from src.core.orders.assignment import AssignmentCoordinator
from src.core.orders.models import Order, OrderStats
from src.core.orders.repository import OrderRepository
from src.core.orders.state_machine import OrderStateMachine
from src.core.orders.time_slots import TimeSlotValidator
from src.core.subscriptions.ledger import SubscriptionQuotaLedger
from src.core.subscriptions.repository import SubscriptionRepository
from src.core.users.models import User
from src.core.zones.service import ServiceZoneRegistry
from src.infra.database import DatabaseManager, storage_boundary

_CANCELLED_STATUSES = (OrderStatus.CANCELLED_BY_CUSTOMER, OrderStatus.CANCELLED_BY_COURIER)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_role(user: User, role: UserRole, message: str) -> None:
    if user.role != role:
        raise AuthorizationError(message)


class OrderService:
    """
    Сервис заказов.
    Все изменения заказа выполняются в одной транзакции с блокировкой строки,
    списание и возврат квоты подписки входят в ту же транзакцию.
    """

    def __init__(
        self,
        db: DatabaseManager,
        *,
        zones: Optional[ServiceZoneRegistry] = None,
        time_slots: Optional[TimeSlotValidator] = None,
        geofence: Optional[GeofenceValidator] = None,
        ledger: Optional[SubscriptionQuotaLedger] = None,
        repository: Optional[OrderRepository] = None,
        subscriptions: Optional[SubscriptionRepository] = None,
        assignment: Optional[AssignmentCoordinator] = None,
        now_provider: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Инициализация сервиса.

        Args:
            db: Менеджер базы данных
            zones: Реестр зон обслуживания
            time_slots: Проверка времени вывоза (по умолчанию из конфига)
            geofence: Проверка попадания в зону
            ledger: Учёт квоты подписок
            repository: Репозиторий заказов
            subscriptions: Репозиторий подписок
            assignment: Координатор принятия заказов
            now_provider: Источник текущего времени (aware datetime)
        """
        self._db = db
        self._repo = repository or OrderRepository(db)
        self._zones = zones or ServiceZoneRegistry(db)
        self._time_slots = time_slots or TimeSlotValidator()
        self._geofence = geofence or GeofenceValidator()
        self._subscriptions = subscriptions or SubscriptionRepository()
        self._ledger = ledger or SubscriptionQuotaLedger(self._subscriptions)
        self._assignment = assignment or AssignmentCoordinator(db, self._repo)
        self._now = now_provider

    # =========================================================================
    # СОЗДАНИЕ
    # =========================================================================

    @storage_boundary("создание заказа")
    async def create(
        self,
        client: User,
        address: Optional[str],
        pickup_time: Optional[datetime],
        comment: Optional[str],
        lat: Optional[float],
        lng: Optional[float],
        subscription_id: Optional[int] = None,
    ) -> Order:
        """
        Создаёт заказ на вывоз.

        Args:
            client: Клиент
            address: Адрес вывоза
            pickup_time: Время вывоза (с часовым поясом)
            comment: Комментарий
            lat: Широта адреса
            lng: Долгота адреса
            subscription_id: Подписка, по которой списывается вывоз

        Returns:
            Заказ в статусе PUBLISHED

        Raises:
            AuthorizationError: Вызывающий не клиент или подписка чужая
            ValidationError: Некорректные данные, адрес вне зоны, время вне правил
            ZoneUnavailableError: Зона обслуживания не настроена
            NotFoundError: Подписка не найдена
            ConflictError: Подписка неактивна, исчерпана или истекла
        """
        _require_role(client, UserRole.CLIENT, "Создать заказ может только клиент")

        clean_address = (address or "").strip()
        if not clean_address:
            raise ValidationError("Адрес не может быть пустым")
        if pickup_time is None:
            raise PickupTimeMissingError("Укажите время вывоза")
        if pickup_time.tzinfo is None or pickup_time.utcoffset() is None:
            raise PickupTimeMissingError("Время вывоза должно содержать часовой пояс")
        if lat is None or lng is None:
            raise ValidationError("Не указаны координаты адреса")

        zone = await self._zones.find_active()
        if zone is None:
            raise ZoneUnavailableError("Зона обслуживания не настроена")
        self._geofence.ensure_inside(lat, lng, zone.coordinates)

        now = self._now()
        self._time_slots.validate(pickup_time, now)

        clean_comment = (comment or "").strip() or None

        async with self._db.transaction() as conn:
            subscription = None
            if subscription_id is not None:
                subscription = await self._subscriptions.get_for_update(conn, subscription_id)
                if subscription is None:
                    raise NotFoundError("Подписка не найдена")
                if subscription.user_id != client.id:
                    raise AuthorizationError("Подписка принадлежит другому пользователю")
                if not subscription.is_active:
                    raise ConflictError("Подписка не активна")
                if not subscription.has_available_orders:
                    raise ConflictError("Лимит вывозов по подписке исчерпан")
                today = now.astimezone(self._time_slots.timezone).date()
                if subscription.is_expired(today):
                    raise ConflictError("Срок подписки истёк")

            order = await self._repo.insert(
                conn,
                client_id=client.id,
                address=clean_address,
                latitude=lat,
                longitude=lng,
                pickup_time=pickup_time,
                comment=clean_comment,
                subscription_id=subscription_id,
            )

            if subscription is not None:
                await self._ledger.debit(conn, subscription)

        await log_info(
            f"Заказ {order.id} создан клиентом {client.id}"
            + (f" по подписке {subscription_id}" if subscription_id is not None else ""),
            type_msg=TypeMsg.INFO,
        )
        return order

    # =========================================================================
    # ПРИНЯТИЕ И СМЕНА СТАТУСА
    # =========================================================================

    async def accept(self, order_id: int, courier: User) -> Order:
        """Курьер берёт заказ (см. AssignmentCoordinator)."""
        return await self._assignment.accept(order_id, courier)

    @storage_boundary("отмена заказа клиентом")
    async def cancel_by_client(self, order_id: int, client: User) -> Order:
        """
        Клиент отменяет свой заказ. Курьер снимается с заказа,
        повторная отмена возвращает заказ без изменений.

        Raises:
            AuthorizationError: Вызывающий не клиент
            NotFoundError: Заказ не найден среди заказов клиента
            ConflictError: Отмена на текущем этапе невозможна
        """
        _require_role(client, UserRole.CLIENT, "Отменить заказ может только клиент")

        async with self._db.transaction() as conn:
            current = await self._repo.get_owned_by_client_for_update(conn, order_id, client.id)
            if current is None:
                raise NotFoundError("Заказ не найден")

            # Повторная отмена ничего не меняет
            if current.status == OrderStatus.CANCELLED_BY_CUSTOMER:
                return current

            OrderStateMachine.ensure_client_can_cancel(current.status)

            order = await self._repo.update_status(
                conn,
                order_id,
                OrderStatus.CANCELLED_BY_CUSTOMER,
                clear_courier=True,
            )
            order = await self._release_quota(conn, order)

        await log_info(f"Заказ {order_id} отменён клиентом {client.id}", type_msg=TypeMsg.INFO)
        return order

    @storage_boundary("смена статуса курьером")
    async def update_status_by_courier(
        self,
        order_id: int,
        courier: User,
        new_status: OrderStatus,
    ) -> Order:
        """
        Курьер продвигает свой заказ по этапам или отказывается от него.

        Raises:
            AuthorizationError: Вызывающий не курьер
            NotFoundError: Заказ не назначен этому курьеру
            ValidationError: Статус не может быть выставлен курьером
            ConflictError: Переход не разрешён из текущего статуса
        """
        _require_role(courier, UserRole.COURIER, "Менять статус может только курьер")

        async with self._db.transaction() as conn:
            current = await self._repo.get_assigned_to_courier_for_update(conn, order_id, courier.id)
            if current is None:
                raise NotFoundError("Заказ не найден")

            if not OrderStateMachine.is_courier_settable(new_status):
                raise ValidationError(f"Курьер не может установить статус {new_status.value}")

            OrderStateMachine.ensure_courier_transition(current.status, new_status)

            order = await self._repo.update_status(conn, order_id, new_status)
            if new_status == OrderStatus.CANCELLED_BY_COURIER:
                order = await self._release_quota(conn, order)

        await log_info(
            f"Заказ {order_id}: {current.status.value} -> {new_status.value} (курьер {courier.id})",
            type_msg=TypeMsg.INFO,
        )
        return order

    @storage_boundary("принудительная смена статуса")
    async def force_status(self, order_id: int, admin: User, new_status: OrderStatus) -> Order:
        """
        Администратор выставляет любой статус без проверки переходов.
        Квота подписки не корректируется, PUBLISHED снимает курьера.

        Raises:
            AuthorizationError: Вызывающий не администратор
            NotFoundError: Заказ не найден
        """
        _require_role(admin, UserRole.ADMIN, "Принудительно менять статус может только администратор")

        async with self._db.transaction() as conn:
            current = await self._repo.get_for_update(conn, order_id)
            if current is None:
                raise NotFoundError("Заказ не найден")

            order = await self._repo.update_status(
                conn,
                order_id,
                new_status,
                clear_courier=new_status == OrderStatus.PUBLISHED,
            )

        if (
            new_status in _CANCELLED_STATUSES
            and order.subscription_id is not None
            and not order.quota_released
        ):
            await log_info(
                f"Заказ {order_id} отменён администратором {admin.id}, "
                f"вывоз по подписке {order.subscription_id} не возвращён",
                type_msg=TypeMsg.WARNING,
            )

        await log_info(
            f"Заказ {order_id}: {current.status.value} -> {new_status.value} (администратор {admin.id})",
            type_msg=TypeMsg.INFO,
        )
        return order

    async def _release_quota(self, conn: Connection, order: Order) -> Order:
        """Возвращает вывоз по подписке не более одного раза на заказ."""
        if order.subscription_id is None or order.quota_released:
            return order

        subscription = await self._subscriptions.get_for_update(conn, order.subscription_id)
        if subscription is None or subscription.used_orders <= 0:
            return order

        await self._ledger.credit(conn, subscription)
        await self._repo.mark_quota_released(conn, order.id)
        return order.model_copy(update={"quota_released": True})

    # =========================================================================
    # ЗАПРОСЫ
    # =========================================================================

    @storage_boundary("заказы клиента")
    async def list_for_client(self, client: User) -> list[Order]:
        _require_role(client, UserRole.CLIENT, "Список доступен только клиенту")
        return await self._repo.list_by_client(client.id)

    @storage_boundary("доступные заказы")
    async def list_available(self, courier: User) -> list[Order]:
        _require_role(courier, UserRole.COURIER, "Список доступен только курьеру")
        return await self._repo.list_available()

    @storage_boundary("активные заказы курьера")
    async def list_active_for_courier(self, courier: User) -> list[Order]:
        _require_role(courier, UserRole.COURIER, "Список доступен только курьеру")
        return await self._repo.list_active_by_courier(courier.id)

    @storage_boundary("статистика курьера")
    async def stats_for_courier(self, courier: User) -> OrderStats:
        """Количество доступных заказов и заказов в работе у курьера."""
        _require_role(courier, UserRole.COURIER, "Статистика доступна только курьеру")
        return OrderStats(
            available_count=await self._repo.count_available(),
            active_count=await self._repo.count_active_by_courier(courier.id),
        )

    @storage_boundary("все заказы")
    async def list_all(self, admin: User) -> list[Order]:
        _require_role(admin, UserRole.ADMIN, "Список доступен только администратору")
        return await self._repo.list_all()

    @storage_boundary("получение заказа")
    async def get_order(self, order_id: int, caller: User) -> Order:
        """
        Возвращает заказ, если он виден вызывающему.
        Клиент видит свои заказы, курьер доступные и назначенные ему,
        администратор любые.

        Raises:
            NotFoundError: Заказ не найден или скрыт для роли
        """
        order = await self._repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Заказ не найден")

        if caller.role == UserRole.ADMIN:
            return order
        if caller.role == UserRole.CLIENT and order.client_id == caller.id:
            return order
        if caller.role == UserRole.COURIER and (order.is_available or order.courier_id == caller.id):
            return order

        raise NotFoundError("Заказ не найден")
