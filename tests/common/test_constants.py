# tests/common/test_constants.py
"""
Тесты для модуля констант и иерархии ошибок.
"""

from datetime import time

import pytest

from src.common.constants import (
    COURIER_ACTIVE_STATUSES,
    PICKUP_SLOTS,
    TERMINAL_STATUSES,
    OrderStatus,
    SubscriptionStatus,
    TypeMsg,
    UserRole,
)
from src.common.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    GeocodingUnavailableError,
    NotFoundError,
    OutsideServiceZoneError,
    PickupOutsideSlotError,
    PickupTimeMissingError,
    PickupTooFarError,
    PickupTooSoonError,
    StorageUnavailableError,
    ValidationError,
    ZoneUnavailableError,
)


class TestTypeMsg:
    """Тесты для enum TypeMsg."""

    def test_type_msg_values(self) -> None:
        assert TypeMsg.DEBUG.value == "debug"
        assert TypeMsg.INFO.value == "info"
        assert TypeMsg.WARNING.value == "warning"
        assert TypeMsg.ERROR.value == "error"
        assert TypeMsg.CRITICAL.value == "critical"

    def test_type_msg_is_str_enum(self) -> None:
        assert isinstance(TypeMsg.DEBUG, str)
        assert TypeMsg.INFO == "info"


class TestUserRole:
    """Тесты для enum UserRole."""

    def test_values(self) -> None:
        assert [role.value for role in UserRole] == ["CLIENT", "COURIER", "ADMIN"]

    def test_from_string(self) -> None:
        assert UserRole("COURIER") is UserRole.COURIER

    def test_unknown_role(self) -> None:
        with pytest.raises(ValueError):
            UserRole("DRIVER")


class TestOrderStatus:
    """Тесты для enum OrderStatus."""

    def test_all_statuses(self) -> None:
        assert {status.value for status in OrderStatus} == {
            "PUBLISHED",
            "ACCEPTED",
            "ON_THE_WAY",
            "PICKED_UP",
            "COMPLETED",
            "CANCELLED_BY_CUSTOMER",
            "CANCELLED_BY_COURIER",
        }

    def test_terminal_statuses(self) -> None:
        assert TERMINAL_STATUSES == {
            OrderStatus.COMPLETED,
            OrderStatus.CANCELLED_BY_CUSTOMER,
            OrderStatus.CANCELLED_BY_COURIER,
        }

    def test_courier_active_statuses_not_terminal(self) -> None:
        assert not set(COURIER_ACTIVE_STATUSES) & TERMINAL_STATUSES
        assert OrderStatus.PUBLISHED not in COURIER_ACTIVE_STATUSES


class TestSubscriptionStatus:

    def test_values(self) -> None:
        assert SubscriptionStatus.ACTIVE == "ACTIVE"
        assert SubscriptionStatus("CANCELED") is SubscriptionStatus.CANCELED


class TestPickupSlots:
    """Интервалы вывоза."""

    def test_slots(self) -> None:
        assert PICKUP_SLOTS == (
            (time(8, 0), time(11, 0)),
            (time(13, 0), time(16, 0)),
            (time(19, 0), time(21, 0)),
        )

    def test_slots_ordered_and_disjoint(self) -> None:
        for (_, end), (next_start, _) in zip(PICKUP_SLOTS, PICKUP_SLOTS[1:]):
            assert end < next_start


class TestExceptions:
    """Иерархия ошибок."""

    @pytest.mark.parametrize(
        "error_cls,code",
        [
            (PickupTimeMissingError, "pickup_time_missing"),
            (PickupTooSoonError, "pickup_too_soon"),
            (PickupTooFarError, "pickup_too_far"),
            (PickupOutsideSlotError, "pickup_outside_slot"),
            (OutsideServiceZoneError, "outside_service_zone"),
        ],
    )
    def test_validation_family(self, error_cls: type[ValidationError], code: str) -> None:
        error = error_cls("сообщение")

        assert isinstance(error, ValidationError)
        assert isinstance(error, DomainError)
        assert error.code == code
        assert error.message == "сообщение"

    def test_domain_errors(self) -> None:
        for error_cls in (NotFoundError, AuthorizationError, ConflictError, ZoneUnavailableError):
            assert issubclass(error_cls, DomainError)
            assert not issubclass(error_cls, ValidationError)

    def test_infrastructure_errors_are_not_domain(self) -> None:
        assert not issubclass(StorageUnavailableError, DomainError)
        assert not issubclass(GeocodingUnavailableError, DomainError)
        assert StorageUnavailableError.code == "storage_unavailable"
