# src/core/users/__init__.py
"""
Домен пользователей.
Ядро только авторизует по роли, аутентификация снаружи.
"""

from src.core.users.models import User

__all__ = [
    "User",
]
