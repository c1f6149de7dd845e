import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response

from menusnap.schemas import (
    CreateResultsPayload,
    ImageEventPayload,
    LanguageOptionResponse,
    LanguagePayload,
    RedirectResponsePayload,
    ResultsSessionResponse,
)
from menusnap.services.image_resolver import ImageSource
from menusnap.services.localizer import LANGUAGE_OPTIONS, UnsupportedLanguageError
from menusnap.services.results_view import ResultsPage
from menusnap.services.session_store import (
    ResultsSession,
    ResultsSessionStore,
    SessionNotFound,
    get_session_store,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _load_session(store: ResultsSessionStore, session_id: UUID) -> ResultsSession:
    try:
        return store.get(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Results session not found.") from exc


def _render(page: ResultsPage) -> Optional[Dict[str, Any]]:
    view = page.render()
    return view.to_dict() if view else None


def _change_language(page: ResultsPage, code: str) -> None:
    try:
        page.change_language(code)
    except UnsupportedLanguageError as exc:
        raise HTTPException(status_code=400, detail=f"Unsupported language: {code}.") from exc


@router.get("/languages", response_model=List[LanguageOptionResponse])
def list_languages() -> List[LanguageOptionResponse]:
    return [
        LanguageOptionResponse(code=option.code, name=option.name, label=option.label)
        for option in LANGUAGE_OPTIONS
    ]


@router.post("/results", response_model=ResultsSessionResponse, status_code=201)
def create_results_session(
    payload: CreateResultsPayload,
    store: ResultsSessionStore = Depends(get_session_store),
) -> ResultsSessionResponse:
    try:
        session = store.create(
            payload.results,
            language=payload.language,
            preview_image=payload.preview_image,
        )
    except UnsupportedLanguageError as exc:
        logger.warning("Results session rejected: unsupported language %s", payload.language)
        raise HTTPException(status_code=400, detail=f"Unsupported language: {payload.language}.") from exc
    return ResultsSessionResponse(session_id=session.session_id, view=_render(session.page) or {})


@router.get("/results/{session_id}")
def read_results(
    session_id: UUID,
    store: ResultsSessionStore = Depends(get_session_store),
) -> Any:
    session = _load_session(store, session_id)
    with session.lock:
        view = _render(session.page)
    if view is None:
        return Response(status_code=204)
    return view


@router.put("/results/{session_id}/language")
def update_language(
    session_id: UUID,
    payload: LanguagePayload,
    store: ResultsSessionStore = Depends(get_session_store),
) -> Any:
    session = _load_session(store, session_id)
    with session.lock:
        _change_language(session.page, payload.language)
        view = _render(session.page)
    if view is None:
        return Response(status_code=204)
    return view


@router.post("/results/{session_id}/items/{item_key:path}/image-events")
def record_image_event(
    session_id: UUID,
    item_key: str,
    payload: ImageEventPayload,
    store: ResultsSessionStore = Depends(get_session_store),
) -> Any:
    session = _load_session(store, session_id)
    with session.lock:
        card = session.page.handle_image_event(item_key, ImageSource(payload.source), payload.outcome)
    if card is None:
        return Response(status_code=204)
    return asdict(card)


@router.post("/results/{session_id}/scan-another", response_model=RedirectResponsePayload)
def scan_another(
    session_id: UUID,
    store: ResultsSessionStore = Depends(get_session_store),
) -> RedirectResponsePayload:
    session = _load_session(store, session_id)
    with session.lock:
        redirect_url = session.page.scan_another()
    return RedirectResponsePayload(redirect_url=redirect_url)


@router.post("/results/{session_id}/new-scan", response_model=RedirectResponsePayload)
def new_scan(
    session_id: UUID,
    store: ResultsSessionStore = Depends(get_session_store),
) -> RedirectResponsePayload:
    session = _load_session(store, session_id)
    with session.lock:
        redirect_url = session.page.new_scan()
    return RedirectResponsePayload(redirect_url=redirect_url)
