# src/core/zones/service.py
"""
Реестр зон обслуживания.
Хранит ровно одну активную зону и атомарно заменяет её.
"""

from __future__ import annotations

from typing import Optional, Sequence

from src.common.constants import ZONE_CLOSURE_TOLERANCE, TypeMsg, UserRole
from src.common.exceptions import AuthorizationError, ValidationError, ZoneUnavailableError
from src.common.logger import log_info
from src.core.geo.polygon import Coordinate
from src.core.users.models import User
from src.core.zones.models import ServiceZone
from src.core.zones.repository import ServiceZoneRepository
from src.infra.database import DatabaseManager, storage_boundary


def close_polygon(vertices: Sequence[Coordinate]) -> list[Coordinate]:
    """
    Замыкает полигон: добавляет первую вершину в конец,
    если первая и последняя различаются больше допуска.
    """
    points = list(vertices)
    if not points:
        return points

    first, last = points[0], points[-1]
    if (
        abs(first.lat - last.lat) > ZONE_CLOSURE_TOLERANCE
        or abs(first.lng - last.lng) > ZONE_CLOSURE_TOLERANCE
    ):
        points.append(first)
    return points


def _distinct_vertex_count(vertices: Sequence[Coordinate]) -> int:
    distinct: list[Coordinate] = []
    for point in vertices:
        if not any(
            abs(point.lat - seen.lat) <= ZONE_CLOSURE_TOLERANCE
            and abs(point.lng - seen.lng) <= ZONE_CLOSURE_TOLERANCE
            for seen in distinct
        ):
            distinct.append(point)
    return len(distinct)


class ServiceZoneRegistry:
    """
    Реестр зон обслуживания.

    Замена зоны выполняется в одной транзакции под табличной блокировкой,
    поэтому читатель всегда видит либо старую, либо новую зону.
    """

    def __init__(
        self,
        db: DatabaseManager,
        repository: Optional[ServiceZoneRepository] = None,
    ) -> None:
        """
        Args:
            db: Менеджер базы данных
            repository: Репозиторий зон (по умолчанию создаётся из db)
        """
        self._db = db
        self._repo = repository or ServiceZoneRepository(db)

    @storage_boundary("установка зоны обслуживания")
    async def set_active(
        self,
        admin: User,
        name: Optional[str],
        vertices: Optional[Sequence[Coordinate]],
    ) -> ServiceZone:
        """
        Делает новую зону единственной активной.

        Args:
            admin: Администратор
            name: Название зоны
            vertices: Вершины полигона (замыкать не обязательно)

        Returns:
            Сохранённая активная зона

        Raises:
            AuthorizationError: Вызывающий не администратор
            ValidationError: Пустое название или меньше трёх вершин
        """
        if admin.role != UserRole.ADMIN:
            raise AuthorizationError("Только администратор может менять зону обслуживания")

        clean_name = (name or "").strip()
        if not clean_name:
            raise ValidationError("Название зоны не может быть пустым")

        points = list(vertices or [])
        if _distinct_vertex_count(points) < 3:
            raise ValidationError("Зона должна содержать минимум 3 вершины")

        closed = close_polygon(points)

        async with self._db.transaction() as conn:
            await self._repo.lock_table(conn)
            deactivated = await self._repo.deactivate_all(conn)
            zone = await self._repo.insert_active(conn, clean_name, closed)

        await log_info(
            f"Зона обслуживания '{zone.name}' активирована (id={zone.id}, вершин={len(closed)}, "
            f"деактивировано={deactivated}, admin={admin.id})",
            type_msg=TypeMsg.INFO,
        )
        return zone

    @storage_boundary("чтение активной зоны")
    async def get_active(self) -> ServiceZone:
        """
        Возвращает активную зону.

        Raises:
            ZoneUnavailableError: Активная зона не настроена
        """
        zone = await self._repo.get_active()
        if zone is None:
            raise ZoneUnavailableError("Зона обслуживания не настроена")
        return zone

    @storage_boundary("поиск активной зоны")
    async def find_active(self) -> Optional[ServiceZone]:
        return await self._repo.get_active()
