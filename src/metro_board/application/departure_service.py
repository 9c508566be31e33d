from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from metro_board.domain.entities import Departure, StopGrouping
from metro_board.domain.services import sort_by_departure

logger = logging.getLogger(__name__)


class DepartureSource(Protocol):
    async def fetch_departures_for_stop_code(self, code: str) -> list[Departure]: ...


class DepartureService:
    """Fans out per-stop-code fetches and merges them into one sorted board."""

    def __init__(self, client: DepartureSource) -> None:
        self._client = client

    async def fetch_departures_for_grouping(self, grouping: StopGrouping) -> list[Departure]:
        """Fetch every stop code of the grouping concurrently, merge, sort.

        Waits for all fetches; if any failed, the first failure (in stop code
        order) is raised and no partial result is returned.
        """
        results = await asyncio.gather(
            *(self._client.fetch_departures_for_stop_code(code) for code in grouping.codes),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        merged: list[Departure] = []
        for chunk in results:
            merged.extend(chunk)  # type: ignore[arg-type]
        logger.debug(
            "Grouping %s: %d departures from %d stop codes",
            grouping.element_id,
            len(merged),
            len(grouping.codes),
        )
        return sort_by_departure(merged)

    async def fetch_all(
        self, groupings: Sequence[StopGrouping]
    ) -> list[list[Departure] | BaseException]:
        """Run every grouping's pipeline concurrently; failures come back in place.

        Each entry is either that grouping's sorted departures or the exception
        its fetch raised, so one failing grouping does not hide the others.
        """
        return await asyncio.gather(
            *(self.fetch_departures_for_grouping(g) for g in groupings),
            return_exceptions=True,
        )
