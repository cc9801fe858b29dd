# src/core/users/models.py
"""
Модель пользователя, передаваемая ядру внешним слоем аутентификации.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.common.constants import UserRole


class User(BaseModel):
    """Аутентифицированный пользователь. Роль неизменна в рамках ядра."""

    id: int = Field(..., description="ID пользователя")
    role: UserRole = Field(..., description="Роль пользователя")
    name: Optional[str] = Field(None, description="Имя")
    phone: Optional[str] = Field(None, description="Номер телефона")
    created_at: Optional[datetime] = Field(None, description="Дата регистрации")

    class Config:
        from_attributes = True
        frozen = True

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    @property
    def is_courier(self) -> bool:
        return self.role == UserRole.COURIER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
