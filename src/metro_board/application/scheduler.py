from __future__ import annotations

import enum
import logging
import math
from datetime import datetime

from metro_board.application.departure_service import DepartureService
from metro_board.application.renderer import BoardRenderer
from metro_board.config import BoardConfig
from metro_board.domain.entities import RefreshStatus
from metro_board.infrastructure.timer import Clock, Timer

logger = logging.getLogger(__name__)

CONNECTION_FAILED = "Connection failed"


class SchedulerState(str, enum.Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


class RefreshScheduler:
    """Runs refresh cycles on a wall-clock aligned cadence.

    A cycle fetches every grouping, renders the ones that succeeded and updates
    the RefreshStatus. The next tick is armed only once a cycle has finished,
    so cycles never overlap.
    """

    def __init__(
        self,
        config: BoardConfig,
        service: DepartureService,
        renderer: BoardRenderer,
        timer: Timer,
        clock: Clock,
    ) -> None:
        self._config = config
        self._service = service
        self._renderer = renderer
        self._timer = timer
        self._clock = clock
        self._stopped = False
        self.state = SchedulerState.IDLE
        self.status = RefreshStatus()

    async def start(self) -> None:
        """Register the tick handler and run the first cycle right away."""
        self._stopped = False
        self._timer.on_tick(self.refresh_all)
        await self.refresh_all()

    def stop(self) -> None:
        """Disarm the timer; a cycle already in flight still completes."""
        self._stopped = True
        self._timer.stop()

    def next_delay(self, now: datetime) -> float:
        """Seconds until the next interval boundary since the epoch, at least the minimum delay."""
        interval_ms = self._config.refresh_interval_seconds * 1000
        now_ms = math.floor(now.timestamp() * 1000)
        next_boundary_ms = math.ceil((now_ms + 1) / interval_ms) * interval_ms
        delay_ms = max(self._config.min_refresh_delay_seconds * 1000, next_boundary_ms - now_ms)
        return delay_ms / 1000

    async def refresh_all(self) -> None:
        """Run one cycle; failures are logged and surface only through the status."""
        self._timer.stop()
        self.state = SchedulerState.REFRESHING
        try:
            groupings = self._config.groupings
            results = await self._service.fetch_all(groupings)

            failed = 0
            for grouping, result in zip(groupings, results):
                if isinstance(result, Exception):
                    failed += 1
                    logger.error(
                        "Refresh failed for %s (%s): %s",
                        grouping.element_id,
                        grouping.label,
                        result,
                        exc_info=result,
                    )
                    continue
                if isinstance(result, BaseException):
                    raise result
                self._renderer.render(grouping.element_id, result)

            if failed:
                self.status.mark_failure(CONNECTION_FAILED)
            else:
                now = self._clock.now()
                self.status.mark_success(now)
                self._renderer.render_last_updated(now)
                logger.info("Refreshed %d groupings", len(groupings))
            self._renderer.render_refresh_status(self.status.error_message)
        except Exception:
            logger.exception("Refresh cycle failed")
            self.status.mark_failure(CONNECTION_FAILED)
            self._renderer.render_refresh_status(self.status.error_message)
        finally:
            self.state = SchedulerState.IDLE
            self._schedule_next()

    def _schedule_next(self) -> None:
        if self._stopped:
            return
        delay = self.next_delay(self._clock.now())
        logger.debug("Next refresh in %.1f s", delay)
        self._timer.start(delay)
