from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

import httpx
from starlette.applications import Starlette
from starlette.routing import Route

from metro_board.application.departure_service import DepartureService
from metro_board.application.renderer import BoardRenderer
from metro_board.application.scheduler import RefreshScheduler
from metro_board.config import BoardConfig, load_config
from metro_board.infrastructure.document import BoardDocument
from metro_board.infrastructure.ovapi_client import OvApiClient
from metro_board.infrastructure.timer import AsyncioTimer, Clock, SystemClock, Timer
from metro_board.web.pages import board_page, status_json

logger = logging.getLogger(__name__)


def create_app(
    config: BoardConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
    timer: Timer | None = None,
    clock: Clock | None = None,
) -> Starlette:
    """Create the Starlette application with all services wired.

    The refresh scheduler starts with the app's lifespan and stops with it.
    """
    config = config if config is not None else load_config()
    clock = clock if clock is not None else SystemClock(config.timezone)
    http_client = (
        http_client
        if http_client is not None
        else httpx.AsyncClient(timeout=config.request_timeout_seconds, follow_redirects=True)
    )
    ovapi_client = OvApiClient(http_client, api_base=config.api_base, tz=config.timezone)

    document = BoardDocument(
        [g.element_id for g in config.groupings]
        + [config.last_updated_element_id, config.refresh_status_element_id]
    )
    renderer = BoardRenderer(document, config, now=clock.now)
    timer = timer if timer is not None else AsyncioTimer()
    scheduler = RefreshScheduler(
        config=config,
        service=DepartureService(ovapi_client),
        renderer=renderer,
        timer=timer,
        clock=clock,
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info("Departure board polling %s", ovapi_client.api_base)
        first_cycle = asyncio.create_task(scheduler.start())
        try:
            yield
        finally:
            scheduler.stop()
            if not first_cycle.done():
                first_cycle.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await first_cycle
            # a tick that already fired still owns the HTTP client
            await timer.wait_idle()
            await ovapi_client.close()

    app = Starlette(
        routes=[
            Route("/", board_page),
            Route("/status", status_json),
        ],
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.document = document
    app.state.scheduler = scheduler
    return app
