"""FastAPI application serving the menu scan results view."""

import logging
from pathlib import Path
from typing import Dict
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from menusnap.api.routes.results import router as results_router
from menusnap.config.settings import DEFAULT_LANGUAGE, LOG_LEVEL
from menusnap.services.localizer import UnsupportedLanguageError, ensure_supported
from menusnap.services.session_store import ResultsSessionStore, SessionNotFound, get_session_store

logger = logging.getLogger(__name__)

try:
    ensure_supported(DEFAULT_LANGUAGE)
except UnsupportedLanguageError as exc:
    raise RuntimeError(f"MENUSNAP_DEFAULT_LANGUAGE is not a supported language: {DEFAULT_LANGUAGE!r}") from exc

app = FastAPI(title="MenuSnap Results")

STATIC_DIR = Path(__file__).resolve().parents[1] / "static"
TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

app.mount("/static", StaticFiles(directory=STATIC_DIR, check_dir=False), name="static")
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

app.include_router(results_router, prefix="/api", tags=["Results"])


@app.get("/results/{session_id}")
def read_results_page(
    request: Request,
    session_id: UUID,
    store: ResultsSessionStore = Depends(get_session_store),
):
    try:
        session = store.get(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Results session not found.") from exc

    with session.lock:
        view = session.page.render()

    if view is None:
        return Response(status_code=204)
    return templates.TemplateResponse(
        request,
        "results.html",
        {"view": view, "session_id": str(session_id)},
    )


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    uvicorn.run("menusnap.main:app", host="127.0.0.1", port=8000, reload=True)
