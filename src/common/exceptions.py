# src/common/exceptions.py
"""
Иерархия ошибок ядра.

Доменные ошибки (DomainError) поднимаются сервисами без изменений,
HTTP-слой сам переводит их в ответы по полю code.
"""

from __future__ import annotations


class DomainError(Exception):
    """Базовая доменная ошибка."""

    code: str = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Некорректные входные данные. Исправляется вызывающей стороной."""

    code = "validation_error"


class PickupTimeMissingError(ValidationError):
    """Не указано время вывоза."""

    code = "pickup_time_missing"


class PickupTooSoonError(ValidationError):
    """Время вывоза раньше минимального запаса."""

    code = "pickup_too_soon"


class PickupTooFarError(ValidationError):
    """Время вывоза дальше горизонта планирования."""

    code = "pickup_too_far"


class PickupOutsideSlotError(ValidationError):
    """Время вывоза вне разрешённых интервалов."""

    code = "pickup_outside_slot"


class OutsideServiceZoneError(ValidationError):
    """Адрес вне зоны обслуживания."""

    code = "outside_service_zone"


class NotFoundError(DomainError):
    """Объект не найден или недоступен для роли вызывающего."""

    code = "not_found"


class AuthorizationError(DomainError):
    """Роль вызывающего не позволяет выполнить действие."""

    code = "forbidden"


class ConflictError(DomainError):
    """Состояние изменено конкурентно или не допускает операцию."""

    code = "conflict"


class ZoneUnavailableError(DomainError):
    """Активная зона обслуживания не настроена."""

    code = "zone_unavailable"


class StorageUnavailableError(Exception):
    """Хранилище недоступно (сбой соединения или драйвера)."""

    code = "storage_unavailable"


class GeocodingUnavailableError(Exception):
    """Геокодер недоступен или не настроен."""

    code = "geocoding_unavailable"
