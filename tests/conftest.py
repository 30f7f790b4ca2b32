from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from iberia_chronos.models import HistoryData


def sample_payload(year: int = 711, n_entities: int = 2) -> dict[str, Any]:
    entities = []
    for i in range(n_entities):
        entities.append({
            "name": f"Entity {i}",
            "color": f"#{i}{i}{i}{i}{i}{i}",
            "boundaryPoints": [[37.0 + i, -8.0], [37.0 + i, -2.0], [39.0 + i, -2.0], [39.0 + i, -8.0]],
            "description": f"Description {i}",
        })
    label = f"{abs(year)} BC" if year < 0 else f"{year} CE"
    return {"year": year, "label": label, "entities": entities}


class FakeGenerator:
    """Stands in for the Bedrock generator; records every prompt."""

    def __init__(self, responses: dict[int, Any] | None = None, error: Exception | None = None):
        self.responses = responses or {}
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    async def generate(self, prompt: str, schema: dict) -> str:
        self.calls.append((prompt, schema))
        if self.error is not None:
            raise self.error
        for year, payload in self.responses.items():
            label = f"{abs(year)} BC" if year < 0 else f"{year} CE"
            if f"Year: {label}." in prompt:
                return payload if isinstance(payload, str) else json.dumps(payload)
        raise RuntimeError("no canned response")


class GatedService:
    """History source whose fetches complete only when the test releases them."""

    def __init__(self) -> None:
        self.gates: dict[int, asyncio.Event] = {}
        self.results: dict[int, HistoryData | Exception] = {}
        self.started: list[int] = []

    def prepare(self, year: int, result: HistoryData | Exception) -> None:
        self.gates[year] = asyncio.Event()
        self.results[year] = result

    def release(self, year: int) -> None:
        self.gates[year].set()

    async def fetch_historical_data(self, year: int) -> HistoryData:
        self.started.append(year)
        await self.gates[year].wait()
        result = self.results[year]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def payload_711() -> dict[str, Any]:
    return sample_payload(711, 3)


@pytest.fixture
def data_711(payload_711) -> HistoryData:
    return HistoryData.from_mapping(payload_711)
