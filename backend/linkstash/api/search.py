# @TASK S3-T3.1 - Search API endpoints
# @TEST tests/test_api_search.py

"""Search API endpoints for Linkstash.

Provides:
- ``GET /search`` -- Unified search over notes and links, merged by relevance.
- ``GET /search/notes`` -- Note search (note text + attached link metadata).
- ``GET /search/notes/archived`` -- Note search over archived notes.
- ``GET /search/links`` -- Link search (title, URL, description only).

Errors:
- Blank or over-long queries and out-of-range paging return 422.
- Data store failures return 503 so clients can offer a retry instead of
  showing "no results".
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status

from linkstash.database import async_session_factory
from linkstash.search.engine import (
    LinkSearchEngine,
    NoteSearchEngine,
    SearchResultPage,
    SearchValidationError,
    UnifiedSearchEngine,
    UnifiedSearchPage,
)
from linkstash.search.params import SearchParams, get_search_params
from linkstash.search.repository import DataAccessError, NoteRepository, SqlAlchemyNoteRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])

P = TypeVar("P", bound=SearchResultPage)

_UNAVAILABLE_DETAIL = "Search is temporarily unavailable. Please try again later."


# ---------------------------------------------------------------------------
# Dependencies & engine factory helpers (extracted for easy mocking in tests)
# ---------------------------------------------------------------------------


def get_note_repository() -> NoteRepository:
    """FastAPI dependency returning the PostgreSQL-backed repository."""
    return SqlAlchemyNoteRepository(async_session_factory)


def get_params() -> SearchParams:
    """FastAPI dependency returning the configured search parameters."""
    return get_search_params()


def _build_note_engine(repository: NoteRepository, params: SearchParams) -> NoteSearchEngine:
    return NoteSearchEngine(repository, params)


def _build_link_engine(repository: NoteRepository, params: SearchParams) -> LinkSearchEngine:
    return LinkSearchEngine(repository, params)


def _build_unified_engine(repository: NoteRepository, params: SearchParams) -> UnifiedSearchEngine:
    """Create a UnifiedSearchEngine over note and link engines sharing one repository."""
    return UnifiedSearchEngine(
        note_engine=_build_note_engine(repository, params),
        link_engine=_build_link_engine(repository, params),
        params=params,
    )


async def _run_search(label: str, call: Callable[[], Awaitable[P]]) -> P:
    """Await an engine call, translating engine errors into HTTP errors."""
    try:
        return await call()
    except SearchValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    except DataAccessError as exc:
        logger.warning("%s search failed: %s", label, exc.message)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=_UNAVAILABLE_DETAIL) from exc


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=UnifiedSearchPage)
async def unified_search(
    owner_id: int = Query(..., description="Telegram user id owning the notes"),  # noqa: B008
    q: str = Query(..., description="Search query"),  # noqa: B008
    page: int = Query(1, description="1-based page number"),  # noqa: B008
    page_size: int = Query(10, description="Results per page"),  # noqa: B008
    repository: NoteRepository = Depends(get_note_repository),  # noqa: B008
    params: SearchParams = Depends(get_params),  # noqa: B008
) -> UnifiedSearchPage:
    """Search notes and links together, merged into one relevance-ranked list.

    Args:
        owner_id: Owner whose notes and links are searched.
        q: The search query string.
        page: Requested page; pages past the end are clamped to the last page.
        page_size: Results per page (1 to the configured maximum).
        repository: Injected candidate source.
        params: Injected scoring configuration.

    Returns:
        UnifiedSearchPage with merged results and per-source match counts.
    """
    logger.info("Unified search request: owner=%s, query=%r, page=%d, page_size=%d", owner_id, q, page, page_size)
    engine = _build_unified_engine(repository, params)
    return await _run_search("Unified", lambda: engine.search(owner_id, q, page=page, page_size=page_size))


@router.get("/notes", response_model=SearchResultPage)
async def search_notes(
    owner_id: int = Query(..., description="Telegram user id owning the notes"),  # noqa: B008
    q: str = Query(..., description="Search query"),  # noqa: B008
    page: int = Query(1, description="1-based page number"),  # noqa: B008
    page_size: int = Query(5, description="Results per page"),  # noqa: B008
    repository: NoteRepository = Depends(get_note_repository),  # noqa: B008
    params: SearchParams = Depends(get_params),  # noqa: B008
) -> SearchResultPage:
    """Search the owner's active notes by note text and attached link metadata."""
    logger.info("Note search request: owner=%s, query=%r, page=%d, page_size=%d", owner_id, q, page, page_size)
    engine = _build_note_engine(repository, params)
    return await _run_search("Note", lambda: engine.search(owner_id, q, page=page, page_size=page_size))


@router.get("/notes/archived", response_model=SearchResultPage)
async def search_archived_notes(
    owner_id: int = Query(..., description="Telegram user id owning the notes"),  # noqa: B008
    q: str = Query(..., description="Search query"),  # noqa: B008
    page: int = Query(1, description="1-based page number"),  # noqa: B008
    page_size: int = Query(5, description="Results per page"),  # noqa: B008
    repository: NoteRepository = Depends(get_note_repository),  # noqa: B008
    params: SearchParams = Depends(get_params),  # noqa: B008
) -> SearchResultPage:
    """Search the owner's archived notes."""
    logger.info(
        "Archived note search request: owner=%s, query=%r, page=%d, page_size=%d", owner_id, q, page, page_size
    )
    engine = _build_note_engine(repository, params)
    return await _run_search(
        "Archived note", lambda: engine.search_archived(owner_id, q, page=page, page_size=page_size)
    )


@router.get("/links", response_model=SearchResultPage)
async def search_links(
    owner_id: int = Query(..., description="Telegram user id owning the notes"),  # noqa: B008
    q: str = Query(..., description="Search query"),  # noqa: B008
    page: int = Query(1, description="1-based page number"),  # noqa: B008
    page_size: int = Query(10, description="Results per page"),  # noqa: B008
    repository: NoteRepository = Depends(get_note_repository),  # noqa: B008
    params: SearchParams = Depends(get_params),  # noqa: B008
) -> SearchResultPage:
    """Search saved links by title, URL and description."""
    logger.info("Link search request: owner=%s, query=%r, page=%d, page_size=%d", owner_id, q, page, page_size)
    engine = _build_link_engine(repository, params)
    return await _run_search("Link", lambda: engine.search(owner_id, q, page=page, page_size=page_size))
