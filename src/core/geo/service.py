# src/core/geo/service.py
"""
Клиент Яндекс.Геокодера.
Адрес -> координаты и подсказки адресов. Вызывается до создания заказа,
вне транзакции ядра.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from src.common.constants import TypeMsg
from src.common.exceptions import GeocodingUnavailableError, ValidationError
from src.common.logger import log_error, log_info
from src.core.geo.polygon import Coordinate


def _as_dict(value: Any) -> dict[str, Any]:
    """Узел ответа геокодера, не являющийся объектом, считается пустым."""
    return value if isinstance(value, dict) else {}


@dataclass
class AddressSuggestion:
    """Подсказка адреса с координатами."""
    address: str
    lat: float
    lng: float


class GeocodingClient:
    """
    Клиент Яндекс.Геокодера (только Яндекс, без fallback).

    Реализует:
    - Прямое геокодирование (адрес -> координаты)
    - Подсказки адресов с координатами
    """

    MAX_RESULTS = 10
    MIN_QUERY_LENGTH = 3

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            api_key: API ключ (из конфига, если None)
            url: Адрес API геокодера
            timeout: Таймаут HTTP запроса (секунды)
            user_agent: Заголовок User-Agent
            client: Готовый HTTP клиент (для тестов)
        """
        if api_key is None or url is None or timeout is None or user_agent is None:
            from src.config import settings
            api_key = settings.geocoder.YANDEX_GEOCODER_API_KEY if api_key is None else api_key
            url = url or settings.geocoder.GEOCODER_URL
            timeout = timeout or settings.geocoder.GEOCODER_TIMEOUT
            user_agent = user_agent or settings.geocoder.GEOCODER_USER_AGENT

        self._api_key = (api_key or "").strip()
        self._url = url
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )

    async def close(self) -> None:
        """Закрывает HTTP клиент."""
        await self._client.aclose()

    async def get_coordinates(self, address: Optional[str]) -> Coordinate:
        """
        Прямое геокодирование.

        Args:
            address: Адрес

        Returns:
            Координаты первого найденного объекта

        Raises:
            ValidationError: Пустой адрес или адрес не найден
            GeocodingUnavailableError: Геокодер недоступен
        """
        clean = (address or "").strip()
        if not clean:
            raise ValidationError("Адрес не может быть пустым")

        members = await self._fetch_feature_members(clean, 1)
        if not members:
            await log_info(f"Адрес не найден в геокодере: {clean}", type_msg=TypeMsg.WARNING)
            raise ValidationError(f"Адрес не найден в геокодере: {clean}")

        coordinate = self._parse_coordinate(members[0], clean)
        await log_info(
            f"Адрес '{clean}' геокодирован: lat={coordinate.lat}, lng={coordinate.lng}",
            type_msg=TypeMsg.DEBUG,
        )
        return coordinate

    async def suggest_addresses(self, query: Optional[str], limit: int = 5) -> list[AddressSuggestion]:
        """
        Подсказки адресов.

        Args:
            query: Начало адреса (не короче трёх символов)
            limit: Количество подсказок, ограничивается [1, MAX_RESULTS]

        Returns:
            Список подсказок (битые элементы пропускаются)
        """
        clean = (query or "").strip()
        if len(clean) < self.MIN_QUERY_LENGTH:
            return []

        safe_limit = max(1, min(limit, self.MAX_RESULTS))
        members = await self._fetch_feature_members(clean, safe_limit)

        suggestions: list[AddressSuggestion] = []
        for item in members:
            try:
                coordinate = self._parse_coordinate(item, clean)
            except ValidationError:
                continue

            address = self._extract_address(item)
            if not address:
                continue

            suggestions.append(AddressSuggestion(address=address, lat=coordinate.lat, lng=coordinate.lng))
            if len(suggestions) >= safe_limit:
                break

        return suggestions

    async def _fetch_feature_members(self, query: str, results: int) -> list[dict[str, Any]]:
        """Запрашивает геокодер и возвращает массив featureMember."""
        if not self._api_key:
            await log_error("Ключ Яндекс.Геокодера не настроен")
            raise GeocodingUnavailableError("Ключ геокодера не настроен")

        try:
            response = await self._client.get(
                self._url,
                params={
                    "geocode": query,
                    "format": "json",
                    "results": max(1, results),
                    "apikey": self._api_key,
                },
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            await log_error(f"Ошибка запроса к геокодеру '{query}': {e}")
            raise GeocodingUnavailableError("Сервис геокодинга временно недоступен") from e
        except ValueError as e:
            await log_error(f"Некорректный ответ геокодера для '{query}': {e}")
            raise GeocodingUnavailableError("Сервис геокодинга вернул некорректный ответ") from e

        if not isinstance(data, dict):
            await log_error(f"Некорректный ответ геокодера для '{query}': {type(data).__name__}")
            raise GeocodingUnavailableError("Сервис геокодинга вернул некорректный ответ")

        collection = _as_dict(_as_dict(data.get("response")).get("GeoObjectCollection"))
        members = collection.get("featureMember", [])
        return members if isinstance(members, list) else []

    @staticmethod
    def _parse_coordinate(item: dict[str, Any], query: str) -> Coordinate:
        """Яндекс отдаёт позицию строкой «долгота широта»."""
        point = _as_dict(_as_dict(_as_dict(item).get("GeoObject")).get("Point"))
        pos = str(point.get("pos") or "").strip()
        if not pos:
            raise ValidationError(f"Не удалось получить координаты для: {query}")

        parts = pos.split()
        if len(parts) != 2:
            raise ValidationError("Неверный формат координат от геокодера")

        try:
            lng, lat = float(parts[0]), float(parts[1])
            return Coordinate(lat=lat, lng=lng)
        except ValueError as e:
            raise ValidationError("Неверный формат координат от геокодера") from e

    @staticmethod
    def _extract_address(item: dict[str, Any]) -> str:
        geo_object = _as_dict(_as_dict(item).get("GeoObject"))
        meta = _as_dict(_as_dict(geo_object.get("metaDataProperty")).get("GeocoderMetaData"))
        address = meta.get("text") or geo_object.get("name") or ""
        return str(address).strip()
