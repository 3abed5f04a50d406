# @TASK S3-T3.1 - Search API endpoint tests
# @TEST tests/test_api_search.py

"""Tests for the search endpoints.

Covers:
- GET /api/search (unified), /api/search/notes, /api/search/notes/archived,
  /api/search/links success cases with camelCase page keys
- Blank query and out-of-range paging return 422
- Data store failures return 503 rather than an empty result
- The repository is replaced through FastAPI dependency overrides
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from linkstash.constants import NoteStatus
from linkstash.search.params import SearchParams
from linkstash.search.repository import DataAccessError, ScorableLink, ScorableNote

_BASE = datetime(2025, 10, 25, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_app():
    """Import and return the FastAPI app with the search router included."""
    from linkstash.main import app

    return app


def _redux_link() -> ScorableLink:
    return ScorableLink(
        id="l1",
        note_id="n2",
        url="https://redux.js.org",
        title="Redux",
        created_at=_BASE,
    )


def _notes() -> list[ScorableNote]:
    return [
        ScorableNote(id="n1", content="Review Redux patterns", telegram_message_id=77, created_at=_BASE),
        ScorableNote(id="n2", content="Shopping list", created_at=_BASE, links=[_redux_link()]),
        ScorableNote(id="n3", content="Gardening", created_at=_BASE),
    ]


@pytest.fixture
def overridden(repository) -> Iterator[AsyncMock]:
    """Install the mock repository and default params on the app."""
    from linkstash.api.search import get_note_repository, get_params

    app = _get_app()
    repository.fetch_scorable_notes.return_value = _notes()
    repository.fetch_scorable_links.return_value = [_redux_link()]
    app.dependency_overrides[get_note_repository] = lambda: repository
    app.dependency_overrides[get_params] = lambda: SearchParams()
    yield repository
    app.dependency_overrides.clear()


async def _get(path: str, **params) -> object:
    transport = ASGITransport(app=_get_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path, params=params)


# ---------------------------------------------------------------------------
# Unified search
# ---------------------------------------------------------------------------


class TestUnifiedSearchEndpoint:
    """GET /api/search"""

    @pytest.mark.asyncio
    async def test_success(self, overridden):
        response = await _get("/api/search", owner_id=42, q="redux")

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "redux"
        assert data["noteCount"] == 2
        assert data["linkCount"] == 1
        assert data["totalCount"] == 3
        assert data["currentPage"] == 1
        assert data["totalPages"] == 1
        assert [item["type"] for item in data["items"]] == ["note", "note", "link"]

    @pytest.mark.asyncio
    async def test_paging(self, overridden):
        response = await _get("/api/search", owner_id=42, q="redux", page=7, page_size=2)

        assert response.status_code == 200
        data = response.json()
        assert data["currentPage"] == 2
        assert data["totalPages"] == 2
        assert len(data["items"]) == 1

    @pytest.mark.asyncio
    async def test_blank_query_returns_422(self, overridden):
        response = await _get("/api/search", owner_id=42, q="   ")

        assert response.status_code == 422
        overridden.fetch_scorable_notes.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_error_uses_current_status_code(self, overridden, recwarn):
        response = await _get("/api/search", owner_id=42, q="")

        assert response.status_code == 422
        assert not [w for w in recwarn if "UNPROCESSABLE" in str(w.message)]

    @pytest.mark.asyncio
    async def test_missing_query_returns_422(self, overridden):
        response = await _get("/api/search", owner_id=42)

        assert response.status_code == 422

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("page", "page_size"), [(0, 10), (1, 0), (1, 101)])
    async def test_bad_paging_returns_422(self, overridden, page, page_size):
        response = await _get("/api/search", owner_id=42, q="redux", page=page, page_size=page_size)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_data_access_error_returns_503(self, overridden):
        overridden.fetch_scorable_links.side_effect = DataAccessError("fetch_scorable_links")

        response = await _get("/api/search", owner_id=42, q="redux")

        assert response.status_code == 503
        assert "temporarily unavailable" in response.json()["detail"]


# ---------------------------------------------------------------------------
# Note and link search
# ---------------------------------------------------------------------------


class TestNoteSearchEndpoint:
    """GET /api/search/notes and /api/search/notes/archived"""

    @pytest.mark.asyncio
    async def test_notes(self, overridden):
        response = await _get("/api/search/notes", owner_id=42, q="redux")

        assert response.status_code == 200
        data = response.json()
        assert data["totalCount"] == 2
        assert {item["note_id"] for item in data["items"]} == {"n1", "n2"}
        assert "noteCount" not in data
        overridden.fetch_scorable_notes.assert_awaited_once_with(42, status=NoteStatus.ACTIVE)

    @pytest.mark.asyncio
    async def test_archived_notes(self, overridden):
        response = await _get("/api/search/notes/archived", owner_id=42, q="redux")

        assert response.status_code == 200
        overridden.fetch_scorable_notes.assert_awaited_once_with(42, status=NoteStatus.ARCHIVED)

    @pytest.mark.asyncio
    async def test_data_access_error_returns_503(self, overridden):
        overridden.fetch_scorable_notes.side_effect = DataAccessError("fetch_scorable_notes")

        response = await _get("/api/search/notes", owner_id=42, q="redux")

        assert response.status_code == 503


class TestLinkSearchEndpoint:
    """GET /api/search/links"""

    @pytest.mark.asyncio
    async def test_links(self, overridden):
        response = await _get("/api/search/links", owner_id=42, q="redux")

        assert response.status_code == 200
        data = response.json()
        assert data["totalCount"] == 1
        item = data["items"][0]
        assert item["type"] == "link"
        assert item["link_id"] == "l1"
        assert item["relevance_score"] == 1.0

    @pytest.mark.asyncio
    async def test_overlong_query_returns_422(self, overridden):
        response = await _get("/api/search/links", owner_id=42, q="x" * 101)

        assert response.status_code == 422


class TestHealth:
    """GET /api/health"""

    @pytest.mark.asyncio
    async def test_health(self):
        response = await _get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
