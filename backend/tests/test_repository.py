# @TASK S1-T1.3 - Repository tests
# @TEST tests/test_repository.py

"""Tests for SqlAlchemyNoteRepository without a live database.

The session factory is a MagicMock whose async context manager yields an
AsyncMock session, so the statements built by the repository can be
inspected and driver failures simulated.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from linkstash.constants import NoteStatus
from linkstash.search.repository import DataAccessError, SqlAlchemyNoteRepository

_BASE = datetime(2025, 10, 25, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _session_factory(rows: list) -> tuple[MagicMock, AsyncMock]:
    """Build a session factory whose session returns *rows* from execute()."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows

    session = AsyncMock()
    session.execute = AsyncMock(return_value=result)

    factory = MagicMock()
    factory.return_value.__aenter__.return_value = session
    factory.return_value.__aexit__.return_value = False
    return factory, session


def _link_row(note_id: uuid.UUID, minutes: int = 0, **overrides) -> SimpleNamespace:
    fields = {
        "id": uuid.uuid4(),
        "note_id": note_id,
        "url": "https://redux.js.org",
        "title": "Redux",
        "description": None,
        "og_image": None,
        "created_at": _BASE + timedelta(minutes=minutes),
        "updated_at": None,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _compiled(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))


# ---------------------------------------------------------------------------
# 1. Row mapping
# ---------------------------------------------------------------------------


class TestFetchScorableNotes:
    """Notes are mapped with their links, newest link first."""

    @pytest.mark.asyncio
    async def test_maps_rows(self):
        note_id = uuid.uuid4()
        older = _link_row(note_id, minutes=0, url="https://old.example")
        newer = _link_row(note_id, minutes=30, url="https://new.example")
        row = SimpleNamespace(
            id=note_id,
            content="Remember redux",
            telegram_message_id=1234,
            created_at=_BASE,
            links=[older, newer],
        )
        factory, _ = _session_factory([row])
        repo = SqlAlchemyNoteRepository(factory)

        notes = await repo.fetch_scorable_notes(42)

        assert len(notes) == 1
        note = notes[0]
        assert note.id == str(note_id)
        assert note.content == "Remember redux"
        assert note.telegram_message_id == 1234
        assert [link.url for link in note.links] == ["https://new.example", "https://old.example"]
        assert all(link.note_id == str(note_id) for link in note.links)

    @pytest.mark.asyncio
    async def test_null_content_becomes_empty(self):
        row = SimpleNamespace(id=uuid.uuid4(), content=None, telegram_message_id=None, created_at=_BASE, links=[])
        factory, _ = _session_factory([row])

        notes = await SqlAlchemyNoteRepository(factory).fetch_scorable_notes(42)

        assert notes[0].content == ""

    @pytest.mark.asyncio
    async def test_filters_by_owner_and_status(self):
        factory, session = _session_factory([])

        await SqlAlchemyNoteRepository(factory).fetch_scorable_notes(42, status=NoteStatus.ARCHIVED)

        sql = _compiled(session.execute.await_args.args[0])
        assert "notes.owner_id = 42" in sql
        assert "notes.status = 'archived'" in sql

    @pytest.mark.asyncio
    async def test_opens_a_session_per_fetch(self):
        factory, _ = _session_factory([])
        repo = SqlAlchemyNoteRepository(factory)

        await repo.fetch_scorable_notes(42)
        await repo.fetch_scorable_links(42)

        assert factory.call_count == 2


class TestFetchScorableLinks:
    """Links are fetched through their parent note's owner and status."""

    @pytest.mark.asyncio
    async def test_maps_rows(self):
        note_id = uuid.uuid4()
        row = _link_row(note_id, title="Redux Toolkit", og_image="https://img.example/r.png")
        factory, session = _session_factory([row])

        links = await SqlAlchemyNoteRepository(factory).fetch_scorable_links(42)

        assert len(links) == 1
        assert links[0].id == str(row.id)
        assert links[0].note_id == str(note_id)
        assert links[0].title == "Redux Toolkit"
        assert links[0].og_image == "https://img.example/r.png"

        sql = _compiled(session.execute.await_args.args[0])
        assert "JOIN notes" in sql
        assert "notes.status = 'active'" in sql


# ---------------------------------------------------------------------------
# 2. Failures
# ---------------------------------------------------------------------------


class TestDataAccessFailures:
    """Driver failures surface as DataAccessError, never as empty results."""

    @pytest.mark.asyncio
    async def test_sqlalchemy_error_is_wrapped(self):
        factory, session = _session_factory([])
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("server closed"))

        with pytest.raises(DataAccessError) as exc_info:
            await SqlAlchemyNoteRepository(factory).fetch_scorable_notes(42)

        assert exc_info.value.operation == "fetch_scorable_notes"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    @pytest.mark.asyncio
    async def test_connection_error_is_wrapped(self):
        factory, _ = _session_factory([])
        factory.return_value.__aenter__.side_effect = ConnectionRefusedError("db down")

        with pytest.raises(DataAccessError) as exc_info:
            await SqlAlchemyNoteRepository(factory).fetch_scorable_links(42)

        assert exc_info.value.operation == "fetch_scorable_links"
        assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)
