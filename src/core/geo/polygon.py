# src/core/geo/polygon.py
"""
Проверка попадания точки в зону обслуживания (алгоритм Ray Casting).
"""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel, Field

from src.common.constants import HORIZONTAL_EDGE_EPSILON
from src.common.exceptions import OutsideServiceZoneError, ZoneUnavailableError


class Coordinate(BaseModel):
    """Вершина полигона. В JSON: {"lat": 51.76, "lng": 55.09}."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Широта")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Долгота")

    class Config:
        frozen = True


def is_point_in_polygon(lat: float, lng: float, polygon: Sequence[Coordinate]) -> bool:
    """
    Проверяет, лежит ли точка внутри многоугольника.

    Луч идёт от точки в сторону роста долготы (x = lng, y = lat),
    нечётное число пересечений рёбер означает «внутри». Порядок обхода
    вершин не важен, замыкать полигон не требуется.

    Args:
        lat: Широта точки
        lng: Долгота точки
        polygon: Вершины полигона

    Returns:
        True если точка внутри
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].lng, polygon[i].lat
        xj, yj = polygon[j].lng, polygon[j].lat
        j = i

        # Горизонтальное ребро не пересекает горизонтальный луч
        if abs(yj - yi) < HORIZONTAL_EDGE_EPSILON:
            continue

        if (yi > lat) == (yj > lat):
            continue

        x_intersect = (xj - xi) * (lat - yi) / (yj - yi) + xi
        if lng < x_intersect:
            inside = not inside

    return inside


class GeofenceValidator:
    """Проверка координат заказа против активной зоны."""

    @staticmethod
    def contains(lat: float, lng: float, polygon: Sequence[Coordinate]) -> bool:
        return is_point_in_polygon(lat, lng, polygon)

    def ensure_inside(
        self,
        lat: float,
        lng: float,
        polygon: Optional[Sequence[Coordinate]],
    ) -> None:
        """
        Поднимает ошибку, если точка вне зоны.

        Raises:
            ZoneUnavailableError: Активная зона не задана или без координат
            OutsideServiceZoneError: Точка вне зоны
        """
        if not polygon:
            raise ZoneUnavailableError("Активная зона не содержит координат")

        if not self.contains(lat, lng, polygon):
            raise OutsideServiceZoneError("Адрес вне зоны обслуживания")
