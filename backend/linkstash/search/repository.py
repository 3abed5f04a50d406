# @TASK S1-T1.3 - Read-only candidate fetch for the search engines
# @TEST tests/test_repository.py

"""Data-access boundary of the search engines.

The engines score typed ``ScorableNote`` / ``ScorableLink`` values and never
see ORM rows. ``SqlAlchemyNoteRepository`` maps rows to those values and
turns driver failures into ``DataAccessError`` so callers can tell
"search failed" apart from "no matches".
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from linkstash.constants import NoteStatus
from linkstash.models import Note, NoteLink

logger = logging.getLogger(__name__)


class DataAccessError(Exception):
    """Raised when candidate rows cannot be fetched from the data store.

    Attributes:
        operation: Name of the fetch that failed.
        message: A human-readable description.
    """

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        self.message = message or f"Data access failed during {operation}"
        super().__init__(self.message)


class ScorableLink(BaseModel):
    """A link with the metadata fields the ranker scores."""

    id: str
    note_id: str
    url: str
    title: str | None = None
    description: str | None = None
    og_image: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class ScorableNote(BaseModel):
    """An owner's note together with every link attached to it."""

    id: str
    content: str = ""
    telegram_message_id: int | None = None
    created_at: datetime
    links: list[ScorableLink] = []


class NoteRepository(Protocol):
    """Read-only candidate source consumed by the search engines."""

    async def fetch_scorable_notes(
        self, owner_id: int, status: NoteStatus = NoteStatus.ACTIVE
    ) -> list[ScorableNote]: ...

    async def fetch_scorable_links(
        self, owner_id: int, status: NoteStatus = NoteStatus.ACTIVE
    ) -> list[ScorableLink]: ...


def _link_from_row(link: NoteLink) -> ScorableLink:
    return ScorableLink(
        id=str(link.id),
        note_id=str(link.note_id),
        url=link.url,
        title=link.title,
        description=link.description,
        og_image=link.og_image,
        created_at=link.created_at,
        updated_at=link.updated_at,
    )


def _note_from_row(note: Note) -> ScorableNote:
    links = sorted(note.links, key=lambda link: link.created_at, reverse=True)
    return ScorableNote(
        id=str(note.id),
        content=note.content or "",
        telegram_message_id=note.telegram_message_id,
        created_at=note.created_at,
        links=[_link_from_row(link) for link in links],
    )


class SqlAlchemyNoteRepository:
    """PostgreSQL-backed ``NoteRepository``.

    Each fetch opens its own session from *session_factory*, so concurrent
    fetches (as issued by unified search) never share a connection.

    Args:
        session_factory: Factory producing ``AsyncSession`` instances.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_scorable_notes(
        self, owner_id: int, status: NoteStatus = NoteStatus.ACTIVE
    ) -> list[ScorableNote]:
        """Return the owner's notes with the given status, newest first."""
        stmt = (
            select(Note)
            .options(selectinload(Note.links))
            .where(Note.owner_id == owner_id, Note.status == status.value)
            .order_by(Note.created_at.desc(), Note.id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                notes = result.scalars().all()
                return [_note_from_row(note) for note in notes]
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Failed to fetch notes for owner=%s status=%s", owner_id, status.value, exc_info=True)
            raise DataAccessError("fetch_scorable_notes") from exc

    async def fetch_scorable_links(
        self, owner_id: int, status: NoteStatus = NoteStatus.ACTIVE
    ) -> list[ScorableLink]:
        """Return links whose parent note belongs to the owner and has the given status."""
        stmt = (
            select(NoteLink)
            .join(Note, NoteLink.note_id == Note.id)
            .where(Note.owner_id == owner_id, Note.status == status.value)
            .order_by(NoteLink.created_at.desc(), NoteLink.id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                links = result.scalars().all()
                return [_link_from_row(link) for link in links]
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Failed to fetch links for owner=%s status=%s", owner_id, status.value, exc_info=True)
            raise DataAccessError("fetch_scorable_links") from exc
