"""
Year-keyed fetch/cache service for generated historical maps.

fetch_historical_data(year) never raises: a cached year is returned as-is,
otherwise one request goes to the text model and any failure (transport,
JSON, shape) degrades to a single placeholder entity. Only successful results
are cached, and a cached year is never replaced.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from . import config
from .models import HistoricalEntity, HistoryData, format_year

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str, schema: dict[str, Any]) -> str: ...


RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "year": {"type": "integer"},
        "label": {"type": "string"},
        "entities": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "color": {"type": "string"},
                    "boundaryPoints": {
                        "type": "array",
                        "items": {
                            "type": "array",
                            "items": {"type": "number"},
                            "minItems": 2,
                            "maxItems": 2,
                        },
                    },
                    "description": {"type": "string"},
                },
                "required": ["name", "color", "boundaryPoints", "description"],
            },
        },
    },
    "required": ["year", "label", "entities"],
}


def build_prompt(year: int) -> str:
    """Natural-language request for one year over the configured region."""
    lat_min, lat_max = config.REGION_LAT
    lon_min, lon_max = config.REGION_LON
    return (
        f"Year: {format_year(year)}. Geography: {config.REGION_NAME}.\n"
        "Tasks:\n"
        f"1. Identify the major political entities (max {config.MAX_ENTITIES}).\n"
        f"2. For each, provide a smooth boundary ({config.BOUNDARY_MIN_POINTS}-"
        f"{config.BOUNDARY_MAX_POINTS} [lat, lon] points) following the peninsula's "
        f"shape (Lat {lat_min}-{lat_max}, Lon {lon_min}-{lon_max}).\n"
        f"3. Provide a brief (max {config.DESCRIPTION_MAX_CHARS} chars) historical summary.\n"
        "4. Give each entity a distinct CSS hex color.\n"
        "\n"
        "Return strictly valid JSON. Priority: speed and accuracy."
    )


def fallback_data(year: int) -> HistoryData:
    """Placeholder shown when the model call or parsing fails."""
    entity = HistoricalEntity(
        name=config.FALLBACK_ENTITY_NAME,
        color=config.FALLBACK_ENTITY_COLOR,
        boundary_points=tuple(
            (float(lat), float(lon)) for lat, lon in config.FALLBACK_BOUNDARY
        ),
        description=config.FALLBACK_DESCRIPTION,
    )
    return HistoryData(year=year, label=format_year(year), entities=(entity,))


def parse_response(text: str | None) -> HistoryData:
    """Decode the model's JSON payload into HistoryData; raises ValueError."""
    try:
        payload = json.loads(text or "{}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Model returned invalid JSON: {e}") from e
    return HistoryData.from_mapping(payload)


class HistoryCache:
    """In-memory year -> HistoryData map. Entries are write-once."""

    def __init__(self) -> None:
        self._entries: dict[int, HistoryData] = {}

    def get(self, year: int) -> HistoryData | None:
        return self._entries.get(year)

    def put(self, year: int, data: HistoryData) -> None:
        if year in self._entries:
            raise KeyError(f"Year {year} is already cached")
        self._entries[year] = data

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, year: object) -> bool:
        return year in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class HistoryService:
    def __init__(
        self,
        generator: TextGenerator | None = None,
        cache: HistoryCache | None = None,
    ) -> None:
        if generator is None:
            from .bedrock import BedrockGenerator
            generator = BedrockGenerator()
        self.generator = generator
        self.cache = cache if cache is not None else HistoryCache()

    async def fetch_historical_data(self, year: int) -> HistoryData:
        cached = self.cache.get(year)
        if cached is not None:
            logger.debug("Cache hit for %s", format_year(year))
            return cached

        logger.info("Requesting entities for %s", format_year(year))
        try:
            text = await self.generator.generate(build_prompt(year), RESPONSE_SCHEMA)
            data = parse_response(text)
        except Exception as e:
            logger.exception("Error fetching historical data for %s: %s", year, e)
            return fallback_data(year)

        # A concurrent request for the same year may have landed first
        cached = self.cache.get(year)
        if cached is not None:
            return cached
        self.cache.put(year, data)
        logger.info(
            "Cached %s: %d entities (%d years cached)",
            data.label,
            len(data.entities),
            len(self.cache),
        )
        return data


_default_service: HistoryService | None = None


def get_default_service() -> HistoryService:
    """Process-wide service backed by Bedrock."""
    global _default_service
    if _default_service is None:
        _default_service = HistoryService()
    return _default_service


async def fetch_historical_data(year: int) -> HistoryData:
    return await get_default_service().fetch_historical_data(year)
