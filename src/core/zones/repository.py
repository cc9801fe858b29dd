# src/core/zones/repository.py
"""
Репозиторий зон обслуживания.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from asyncpg import Connection

from src.core.geo.polygon import Coordinate
from src.core.zones.models import ServiceZone
from src.infra.database import DatabaseManager


class ServiceZoneRepository:
    """Репозиторий зон. Ошибки БД пробрасываются вызывающему."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Args:
            db: Менеджер базы данных
        """
        self._db = db

    async def get_active(self) -> Optional[ServiceZone]:
        """Возвращает активную зону или None."""
        row = await self._db.fetchrow(
            """
            SELECT id, name, coordinates, active, created_at
            FROM service_zones
            WHERE active
            ORDER BY id DESC
            LIMIT 1
            """
        )
        return self._row_to_zone(row) if row else None

    async def lock_table(self, conn: Connection) -> None:
        """
        Блокирует таблицу зон до конца транзакции.
        Режим конфликтует сам с собой, поэтому две замены зоны не идут параллельно,
        а чтение активной зоны не блокируется.
        """
        await conn.execute("LOCK TABLE service_zones IN SHARE ROW EXCLUSIVE MODE")

    async def deactivate_all(self, conn: Connection) -> int:
        """Деактивирует все активные зоны. Возвращает количество затронутых строк."""
        status = await conn.execute("UPDATE service_zones SET active = FALSE WHERE active")
        return _affected_rows(status)

    async def insert_active(
        self,
        conn: Connection,
        name: str,
        coordinates: Sequence[Coordinate],
    ) -> ServiceZone:
        """Сохраняет новую активную зону."""
        row = await conn.fetchrow(
            """
            INSERT INTO service_zones (name, coordinates, active)
            VALUES ($1, $2::jsonb, TRUE)
            RETURNING id, name, coordinates, active, created_at
            """,
            name,
            json.dumps([c.model_dump() for c in coordinates]),
        )
        return self._row_to_zone(row)

    def _row_to_zone(self, row: Any) -> ServiceZone:
        """Конвертирует строку БД в модель ServiceZone."""
        raw = row["coordinates"]
        if isinstance(raw, str):
            raw = json.loads(raw)
        return ServiceZone(
            id=row["id"],
            name=row["name"],
            coordinates=[Coordinate(**point) for point in raw or []],
            active=row["active"],
            created_at=row["created_at"],
        )


def _affected_rows(status: str) -> int:
    """Разбирает статус команды asyncpg вида 'UPDATE 3'."""
    try:
        return int(str(status).rsplit(" ", 1)[-1])
    except ValueError:
        return 0
