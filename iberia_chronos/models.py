"""Records exchanged between the model, the cache, the shell and the map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

Point = tuple[float, float]


def format_year(year: int) -> str:
    """Display label for a signed year: 300 BC, 711 CE."""
    if year < 0:
        return f"{abs(year)} BC"
    return f"{year} CE"


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _require_int(value: Any, field_name: str) -> int:
    # bool is an int subclass; JSON numbers like 711.0 are accepted
    if isinstance(value, bool):
        raise ValueError(f"Expected integer for '{field_name}'")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValueError(f"Expected integer for '{field_name}'")


def _parse_point(value: Any, field_name: str) -> Point:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"Expected [lat, lon] pair in '{field_name}'")
    lat, lon = value
    for coord in (lat, lon):
        if isinstance(coord, bool) or not isinstance(coord, (int, float)):
            raise ValueError(f"Non-numeric coordinate in '{field_name}'")
    return (float(lat), float(lon))


@dataclass(frozen=True, slots=True)
class HistoricalEntity:
    """One political entity drawn as a polygon."""

    name: str
    color: str
    boundary_points: tuple[Point, ...]
    description: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> HistoricalEntity:
        if not isinstance(data, Mapping):
            raise ValueError("Expected object for entity")
        raw_points = data.get("boundaryPoints")
        if not isinstance(raw_points, list):
            raise ValueError("Expected list for 'boundaryPoints'")
        points = tuple(_parse_point(p, "boundaryPoints") for p in raw_points)
        if len(points) < 3:
            raise ValueError(f"Polygon needs at least 3 points, got {len(points)}")
        description = data.get("description")
        if not isinstance(description, str):
            raise ValueError("Expected string for 'description'")
        return cls(
            name=_require_str(data.get("name"), "name"),
            color=_require_str(data.get("color"), "color"),
            boundary_points=points,
            description=description.strip(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "boundaryPoints": [list(p) for p in self.boundary_points],
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class HistoryData:
    """Entities for one year, in draw order."""

    year: int
    label: str
    entities: tuple[HistoricalEntity, ...]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> HistoryData:
        if not isinstance(data, Mapping):
            raise ValueError("Expected object for history data")
        year = _require_int(data.get("year"), "year")
        label = data.get("label")
        if not isinstance(label, str) or not label.strip():
            label = format_year(year)
        raw_entities = data.get("entities")
        if not isinstance(raw_entities, list) or not raw_entities:
            raise ValueError("Expected non-empty list for 'entities'")
        return cls(
            year=year,
            label=label.strip(),
            entities=tuple(HistoricalEntity.from_mapping(e) for e in raw_entities),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "label": self.label,
            "entities": [e.to_dict() for e in self.entities],
        }
