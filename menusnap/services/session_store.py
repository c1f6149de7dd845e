"""In-memory registry of results pages, one per scanned menu session."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID, uuid4

from menusnap.config import settings
from menusnap.schemas import ResultSet
from menusnap.services.results_view import ResultsPage

logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    """Raised when a session id is unknown or was evicted."""


@dataclass
class ResultsSession:
    session_id: UUID
    page: ResultsPage
    new_scan_requested: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class ResultsSessionStore:
    def __init__(
        self,
        *,
        max_sessions: int = settings.MAX_SESSIONS,
        default_language: str = settings.DEFAULT_LANGUAGE,
        appetizer_count: int = settings.APPETIZER_COUNT,
        scan_url: str = settings.SCAN_URL,
        capture_url: str = settings.CAPTURE_URL,
    ) -> None:
        self.max_sessions = max_sessions
        self.default_language = default_language
        self.appetizer_count = appetizer_count
        self.scan_url = scan_url
        self.capture_url = capture_url
        self._sessions: "OrderedDict[UUID, ResultsSession]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(
        self,
        results: Optional[ResultSet],
        *,
        language: Optional[str] = None,
        preview_image: Optional[str] = None,
    ) -> ResultsSession:
        session_id = uuid4()

        def _scan_another() -> str:
            # The host drops the result set and returns to the pre-scan screen.
            page.replace_results(None)
            logger.info("Result set discarded", extra={"session_id": str(session_id)})
            return self.scan_url

        def _new_scan() -> str:
            session.new_scan_requested = True
            logger.info("New capture requested", extra={"session_id": str(session_id)})
            return self.capture_url

        page = ResultsPage(
            results,
            language=language or self.default_language,
            on_scan_another=_scan_another,
            on_new_scan=_new_scan,
            preview_image=preview_image,
            appetizer_count=self.appetizer_count,
        )
        session = ResultsSession(session_id=session_id, page=page)

        with self._lock:
            self._sessions[session_id] = session
            while len(self._sessions) > self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info("Evicted results session", extra={"session_id": str(evicted_id)})

        logger.info(
            "Results session created",
            extra={
                "session_id": str(session_id),
                "language": page.language,
                "items": len(page.item_keys),
            },
        )
        return session

    def get(self, session_id: UUID) -> ResultsSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFound(str(session_id))
            self._sessions.move_to_end(session_id)
            return session

    def remove(self, session_id: UUID) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)


_store: Optional[ResultsSessionStore] = None
_store_lock = threading.Lock()


def get_session_store() -> ResultsSessionStore:
    """FastAPI dependency returning the process-wide store."""

    global _store
    with _store_lock:
        if _store is None:
            _store = ResultsSessionStore()
        return _store


__all__ = ["ResultsSession", "ResultsSessionStore", "SessionNotFound", "get_session_store"]
