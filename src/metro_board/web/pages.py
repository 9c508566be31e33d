from __future__ import annotations

from pathlib import Path
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.templating import Jinja2Templates

from metro_board.application.scheduler import RefreshScheduler
from metro_board.config import BoardConfig
from metro_board.infrastructure.document import BoardDocument

_UI_DIR = Path(__file__).parent / "ui"

templates = Jinja2Templates(directory=str(_UI_DIR))


def board_context(document: BoardDocument, config: BoardConfig) -> dict[str, Any]:
    """Template context: one board per grouping plus the two status texts."""
    return {
        "boards": [
            {
                "element_id": g.element_id,
                "label": g.label,
                "rows": document.rows_of(g.element_id),
            }
            for g in config.groupings
        ],
        "last_updated": document.text_of(config.last_updated_element_id),
        "refresh_status": document.text_of(config.refresh_status_element_id),
    }


async def board_page(request: Request) -> Response:
    """GET / — the departure board as HTML."""
    context = board_context(request.app.state.document, request.app.state.config)
    return templates.TemplateResponse(
        request,
        "board.html",
        context,
        headers={"Cache-Control": "no-store"},
    )


async def status_json(request: Request) -> JSONResponse:
    """GET /status — last refresh time and the current error text."""
    scheduler: RefreshScheduler = request.app.state.scheduler
    last_updated = scheduler.status.last_updated
    return JSONResponse(
        {
            "lastUpdated": last_updated.isoformat() if last_updated is not None else None,
            "error": scheduler.status.error_message,
            "state": scheduler.state.value,
        }
    )
