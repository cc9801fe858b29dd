# src/core/geo/__init__.py
"""
Гео-модуль.
Проверка попадания в зону обслуживания и геокодирование адресов.
"""

from src.core.geo.polygon import Coordinate, GeofenceValidator, is_point_in_polygon
from src.core.geo.service import AddressSuggestion, GeocodingClient

__all__ = [
    "Coordinate",
    "GeofenceValidator",
    "is_point_in_polygon",
    "AddressSuggestion",
    "GeocodingClient",
]
