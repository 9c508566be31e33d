#!/usr/bin/env python3
"""Metro departure board — repository root entry point.

Usage:
    uv run server.py
    BOARD_URL="https://board.example/?api=https://proxy.example/ovapi" uv run server.py
"""
from __future__ import annotations

import logging
import os

import uvicorn
from starlette.middleware.cors import CORSMiddleware

from metro_board.web import create_app

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3001"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

if __name__ == "__main__":
    app = create_app()
    # /status is polled by other dashboards
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    print(f"Departure board listening on http://{HOST}:{PORT}/")
    uvicorn.run(app, host=HOST, port=PORT)
