"""Quake Monitor API - FastAPI rendering-surface host.

Serves the live monitor over HTTP: state snapshots, mode control, and a
WebSocket stream of render frames for drawing clients.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, TypeAdapter

from src.core.render import RenderFrame, ViewMode
from src.core.report import SeismicReport, parse_report
from src.orchestrator import MonitorSnapshot, Orchestrator
from src.shell.config_loader import load_config
from src.shell.surfaces import FrameBroadcaster, LogCueSink


log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# How many recent reports to search when selecting one by ID
HISTORY_SEARCH_LIMIT = 20

_frame_adapter = TypeAdapter(RenderFrame)
_snapshot_adapter = TypeAdapter(MonitorSnapshot)


# ===== Request Models =====

class ModeChange(BaseModel):
    mode: ViewMode
    report_id: str | None = None


class AutoZoomChange(BaseModel):
    enabled: bool


def frame_to_json(frame: RenderFrame) -> dict[str, Any]:
    """Serialize a render frame to JSON-compatible data."""
    return _frame_adapter.dump_python(frame, mode="json")


def snapshot_to_json(snapshot: MonitorSnapshot) -> dict[str, Any]:
    data = _snapshot_adapter.dump_python(snapshot, mode="json")
    data["live_eew"]["phase"] = snapshot.live_eew.phase.value
    data["display_eew"]["phase"] = snapshot.display_eew.phase.value
    return data


def _find_report(records: list[dict[str, Any]], report_id: str) -> SeismicReport | None:
    for record in records:
        report = parse_report(record)
        if report is not None and report.id == report_id:
            return report
    return None


def create_app(
    orchestrator: Orchestrator | None = None,
    broadcaster: FrameBroadcaster | None = None,
) -> FastAPI:
    """Build the API around an orchestrator.

    Args:
        orchestrator: Monitor to serve (built from config if not provided)
        broadcaster: Frame fan-out; must be the orchestrator's surface

    Returns:
        FastAPI application
    """
    if broadcaster is None:
        broadcaster = FrameBroadcaster()
    if orchestrator is None:
        orchestrator = Orchestrator(
            load_config(),
            surface=broadcaster,
            cue_sink=LogCueSink(),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await orchestrator.start()
        try:
            yield
        finally:
            await orchestrator.stop()

    app = FastAPI(
        title="Quake Monitor API",
        description="Live earthquake report and early-warning monitor",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    app.state.orchestrator = orchestrator
    app.state.broadcaster = broadcaster

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        snapshot = orchestrator.snapshot()
        return {
            "status": "healthy",
            "feeds": {kind.value: status.value for kind, status in snapshot.feeds.items()},
        }

    @app.get("/state")
    async def get_state():
        """Current monitor state."""
        return snapshot_to_json(orchestrator.snapshot())

    @app.put("/mode")
    async def change_mode(change: ModeChange):
        """Switch between live, history and simulation display."""
        if change.mode == ViewMode.LIVE:
            orchestrator.return_live()

        elif change.mode == ViewMode.SIMULATION:
            orchestrator.start_simulation()

        else:
            if change.report_id is None:
                report = orchestrator.snapshot().live_report
                if report is None:
                    raise HTTPException(status_code=409, detail="No report available")
            else:
                try:
                    records = await asyncio.to_thread(
                        orchestrator.history_client.fetch_reports, HISTORY_SEARCH_LIMIT,
                    )
                except Exception as e:
                    logger.error("Failed to fetch history: %s", e)
                    raise HTTPException(status_code=502, detail="History unavailable")

                report = _find_report(records, change.report_id)
                if report is None:
                    raise HTTPException(
                        status_code=404,
                        detail=f"Report '{change.report_id}' not found",
                    )
            orchestrator.select_history(report)

        return snapshot_to_json(orchestrator.snapshot())

    @app.post("/simulation")
    async def start_simulation():
        """Play the scripted demo earthquake."""
        orchestrator.start_simulation()
        return snapshot_to_json(orchestrator.snapshot())

    @app.put("/auto-zoom")
    async def change_auto_zoom(change: AutoZoomChange):
        orchestrator.set_auto_zoom(change.enabled)
        return {"auto_zoom": change.enabled}

    @app.websocket("/ws/frames")
    async def ws_frames(ws: WebSocket):
        """Stream render frames to a drawing client.

        The latest frame is sent immediately, then every new one.
        """
        await ws.accept()
        queue = broadcaster.subscribe()
        if broadcaster.latest is None:
            queue.put_nowait(orchestrator.current_frame())
        try:
            while True:
                frame = await queue.get()
                await ws.send_json(frame_to_json(frame))
        except WebSocketDisconnect:
            logger.debug("Frame subscriber disconnected")
        finally:
            broadcaster.unsubscribe(queue)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
