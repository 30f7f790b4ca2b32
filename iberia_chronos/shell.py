"""
Application state for one explorer session.

HistoryShell owns the selected year, displayed data, loading flag, visible
error and selected entity. Each load takes a token from a monotonically
increasing counter; a result is committed only if no newer load has started
since (last-started wins). Stale results are dropped, never merged.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from . import config
from .models import HistoricalEntity, HistoryData, format_year
from .validation import parse_year

logger = logging.getLogger(__name__)


class HistorySource(Protocol):
    async def fetch_historical_data(self, year: int) -> HistoryData: ...


@dataclass
class ShellState:
    year: int = config.DEFAULT_YEAR
    input_value: str = str(config.DEFAULT_YEAR)
    loading: bool = False
    data: HistoryData | None = None
    error: str | None = None
    selected_entity: HistoricalEntity | None = None


class HistoryShell:
    def __init__(
        self,
        service: HistorySource,
        initial_year: int = config.DEFAULT_YEAR,
        on_commit: Callable[[ShellState], None] | None = None,
    ) -> None:
        self.service = service
        self.state = ShellState(year=initial_year, input_value=str(initial_year))
        self.on_commit = on_commit
        self._request_id = 0

    @property
    def request_id(self) -> int:
        return self._request_id

    @property
    def display_label(self) -> str:
        if self.state.data is not None and self.state.data.label:
            return self.state.data.label
        return format_year(self.state.year)

    @property
    def entities(self) -> tuple[HistoricalEntity, ...]:
        return self.state.data.entities if self.state.data is not None else ()

    @property
    def entity_count(self) -> int:
        return len(self.entities)

    def _is_current(self, token: int) -> bool:
        return token == self._request_id

    def _commit(self) -> None:
        if self.on_commit is not None:
            self.on_commit(self.state)

    async def load_history(self, target_year: int) -> bool:
        """
        Fetch and display target_year. Returns True if the result was
        committed, False if a newer load superseded it.
        """
        self._request_id += 1
        token = self._request_id
        s = self.state
        s.loading = True
        s.error = None
        s.selected_entity = None

        try:
            data = await self.service.fetch_historical_data(target_year)
        except Exception as e:
            if not self._is_current(token):
                logger.debug("Discarding stale failure for %s (request %d)", target_year, token)
                return False
            logger.exception("History load failed for %s: %s", target_year, e)
            s.error = config.LOAD_FAILED_ERROR
            s.loading = False
            self._commit()
            return True

        if not self._is_current(token):
            logger.debug(
                "Discarding stale result for %s (request %d, current %d)",
                target_year, token, self._request_id,
            )
            return False
        s.data = data
        s.loading = False
        self._commit()
        return True

    def submit_year(self, text: str) -> int | None:
        """
        Validate the year field. On success the selected year changes and the
        parsed year is returned for loading; on failure the error is set and
        nothing else changes.
        """
        self.state.input_value = text
        try:
            year = parse_year(text)
        except ValueError as e:
            logger.info("Rejected year input %r: %s", text, e)
            self.state.error = config.YEAR_RANGE_ERROR
            return None
        self.state.year = year
        return year

    async def submit(self, text: str) -> bool:
        """Form submit: validate, then load. False if input was rejected or superseded."""
        year = self.submit_year(text)
        if year is None:
            return False
        return await self.load_history(year)

    def select_entity(self, entity: HistoricalEntity) -> None:
        self.state.selected_entity = entity

    def clear_selection(self) -> None:
        self.state.selected_entity = None
