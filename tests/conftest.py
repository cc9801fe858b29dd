# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from datetime import date
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("YANDEX_GEOCODER_API_KEY", "test_api_key")

from src.common.constants import UserRole  # noqa: E402
from src.core.geo.polygon import Coordinate  # noqa: E402
from src.core.orders.service import OrderService  # noqa: E402
from src.core.orders.time_slots import TimeSlotValidator  # noqa: E402
from src.core.users.models import User  # noqa: E402
from src.core.zones.service import ServiceZoneRegistry  # noqa: E402
from tests.fakes import (  # noqa: E402
    NOW,
    VALID_PICKUP,
    FakeDatabase,
    FakeOrderRepository,
    FakeStore,
    FakeSubscriptionRepository,
    FakeZoneRepository,
)


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "PROJECT_NAME": "waste_pickup_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "colored",
        "DEFAULT_CITY": "Оренбург",
        "TIMEZONE": "Asia/Yekaterinburg",
        "DB_HOST": "localhost",
        "DB_PORT": 5432,
        "DB_NAME": "waste_pickup_test",
        "DB_USER": "postgres",
        "DB_PASSWORD": "test_password",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 30,
        "YANDEX_GEOCODER_API_KEY": "test_api_key",
        "GEOCODER_URL": "https://geocode-maps.yandex.ru/1.x",
        "GEOCODER_TIMEOUT": 5.0,
        "MIN_LEAD_TIME_MINUTES": 60,
        "MAX_HORIZON_DAYS": 7,
    }


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetchval = AsyncMock(return_value=None)
    return db


@pytest.fixture
def mock_conn() -> AsyncMock:
    """Мок соединения внутри транзакции."""
    conn = AsyncMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.execute = AsyncMock(return_value="UPDATE 1")
    return conn


@pytest.fixture
def store() -> FakeStore:
    """In-memory хранилище с блокировками строк."""
    return FakeStore()


@pytest.fixture
def fake_db(store: FakeStore) -> FakeDatabase:
    return FakeDatabase(store)


@pytest.fixture
def zone_registry(fake_db: FakeDatabase, store: FakeStore) -> ServiceZoneRegistry:
    return ServiceZoneRegistry(fake_db, FakeZoneRepository(store))


@pytest.fixture
def time_slots() -> TimeSlotValidator:
    return TimeSlotValidator("Asia/Yekaterinburg", min_lead_minutes=60, max_horizon_days=7)


@pytest.fixture
def order_service(
    fake_db: FakeDatabase,
    store: FakeStore,
    zone_registry: ServiceZoneRegistry,
    time_slots: TimeSlotValidator,
) -> OrderService:
    """Сервис заказов поверх in-memory хранилища с фиксированным временем."""
    return OrderService(
        fake_db,
        zones=zone_registry,
        time_slots=time_slots,
        repository=FakeOrderRepository(store),
        subscriptions=FakeSubscriptionRepository(store),
        now_provider=lambda: NOW,
    )


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def client() -> User:
    return User(id=1, role=UserRole.CLIENT, name="Клиент", phone="+79001112233")


@pytest.fixture
def other_client() -> User:
    return User(id=2, role=UserRole.CLIENT, name="Другой клиент")


@pytest.fixture
def courier() -> User:
    return User(id=10, role=UserRole.COURIER, name="Курьер")


@pytest.fixture
def other_courier() -> User:
    return User(id=11, role=UserRole.COURIER, name="Второй курьер")


@pytest.fixture
def admin() -> User:
    return User(id=100, role=UserRole.ADMIN, name="Администратор")


@pytest.fixture
def square_zone() -> list[Coordinate]:
    """Квадрат вокруг центра Оренбурга (не замкнутый)."""
    return [
        Coordinate(lat=51.70, lng=55.00),
        Coordinate(lat=51.70, lng=55.20),
        Coordinate(lat=51.85, lng=55.20),
        Coordinate(lat=51.85, lng=55.00),
    ]


@pytest.fixture
def active_zone(store: FakeStore, square_zone: list[Coordinate]) -> list[Coordinate]:
    """Активная зона в хранилище."""
    store.add_zone("Оренбург", square_zone)
    return square_zone


@pytest.fixture
def sample_order_row() -> dict[str, Any]:
    """Пример строки заказа из БД."""
    return {
        "id": 42,
        "client_id": 1,
        "courier_id": None,
        "subscription_id": None,
        "address": "ул. Советская, 10",
        "latitude": 51.77,
        "longitude": 55.10,
        "pickup_time": VALID_PICKUP,
        "comment": "Пакеты у двери",
        "status": "PUBLISHED",
        "quota_released": False,
        "created_at": NOW,
        "updated_at": NOW,
    }


@pytest.fixture
def sample_subscription_row() -> dict[str, Any]:
    """Пример строки подписки из БД."""
    return {
        "id": 7,
        "user_id": 1,
        "plan": "WEEKLY",
        "start_date": date(2026, 3, 1),
        "end_date": date(2026, 3, 15),
        "price": 690,
        "status": "ACTIVE",
        "total_allowed_orders": 7,
        "used_orders": 2,
        "created_at": NOW,
    }


# =============================================================================
# УТИЛИТЫ
# =============================================================================

@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file
