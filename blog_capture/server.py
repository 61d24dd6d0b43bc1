"""FastAPI app: trigger captures, download the Excel report, fetch single screenshots."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, Response

from blog_capture.capture import run_batch
from blog_capture.config import load_config
from blog_capture.errors import (
    ArtifactNotFoundError,
    EngineError,
    InvalidRequestError,
    SessionNotFoundError,
)
from blog_capture.report import XLSX_CONTENT_TYPE, export_report
from blog_capture.schemas import CaptureRequest, CaptureResponse, ExportRequest
from blog_capture.store import ArtifactStore

logger = logging.getLogger(__name__)

SETTINGS_ENV = "BLOG_CAPTURE_SETTINGS"

router = APIRouter()


def _get_store(request: Request) -> ArtifactStore:
    return request.app.state.store


def _get_config(request: Request) -> Dict[str, object]:
    return request.app.state.config


# Sync handlers: the Playwright sync API cannot run inside the event loop.
# Each batch runs on a worker thread with its own browser.
@router.post("/api/capture", response_model=CaptureResponse)
def capture(
    body: CaptureRequest,
    store: ArtifactStore = Depends(_get_store),
    config: Dict[str, object] = Depends(_get_config),
):
    items = [i.to_item() for i in body.items]
    try:
        session = run_batch(items, store, config)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EngineError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return CaptureResponse.from_session(session)


@router.post("/api/download-excel/{session_id}")
def download_excel(
    session_id: str,
    body: ExportRequest,
    store: ArtifactStore = Depends(_get_store),
    config: Dict[str, object] = Depends(_get_config),
):
    try:
        store.require_session(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    content = export_report(
        store, session_id, [r.to_result() for r in body.results], config
    )
    return Response(
        content=content,
        media_type=XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": f"attachment; filename=captures_{session_id}.xlsx"},
    )


@router.get("/api/image/{session_id}/{filename}")
def get_image(
    session_id: str,
    filename: str,
    store: ArtifactStore = Depends(_get_store),
):
    try:
        path = store.resolve(session_id, filename)
    except ArtifactNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return FileResponse(path, media_type="image/png")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting blog capture service, captures => {app.state.store.root_dir}")
    yield
    logger.info("Shutting down blog capture service")


def create_app(config: Optional[Dict[str, object]] = None) -> FastAPI:
    """
    Build the app. Without an explicit config, settings come from the YAML file named by
    BLOG_CAPTURE_SETTINGS (if any) plus environment overrides.
    """
    if config is None:
        config = load_config(os.environ.get(SETTINGS_ENV))

    app = FastAPI(title="Blog Capture", lifespan=lifespan)
    app.state.config = config
    app.state.store = ArtifactStore(config.get("captures_dir", "captures"))
    app.include_router(router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
