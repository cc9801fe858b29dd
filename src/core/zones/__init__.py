# src/core/zones/__init__.py
"""
Модуль зон обслуживания.
"""

from src.core.zones.models import ServiceZone
from src.core.zones.repository import ServiceZoneRepository
from src.core.zones.service import ServiceZoneRegistry, close_polygon

__all__ = [
    "ServiceZone",
    "ServiceZoneRepository",
    "ServiceZoneRegistry",
    "close_polygon",
]
