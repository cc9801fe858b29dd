# src/core/zones/models.py
"""
Модели зоны обслуживания.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.core.geo.polygon import Coordinate


class ServiceZone(BaseModel):
    """Зона обслуживания (полигон). Активна не более одной зоны."""

    id: int = Field(..., description="ID зоны")
    name: str = Field(..., description="Название, например «Оренбург»")
    coordinates: list[Coordinate] = Field(default_factory=list, description="Вершины полигона")
    active: bool = Field(True, description="Активна ли зона")
    created_at: Optional[datetime] = Field(None, description="Время создания")

    class Config:
        from_attributes = True
