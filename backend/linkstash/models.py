# @TASK S0-T0.4 - PostgreSQL schema for notes and their links

import uuid
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from linkstash.constants import NoteStatus
from linkstash.database import Base


class Note(Base):
    """A user-authored note saved through the Telegram bot."""

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[int] = mapped_column(BigInteger, nullable=False)  # Telegram user id
    telegram_message_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    content: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(20), server_default=NoteStatus.ACTIVE.value, default=NoteStatus.ACTIVE)
    is_marked: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    links: Mapped[list["NoteLink"]] = relationship(
        back_populates="note",
        cascade="all, delete-orphan",
        order_by="NoteLink.created_at.desc()",
    )

    __table_args__ = (
        CheckConstraint("status IN ('active', 'archived')", name="ck_notes_status"),
        Index("idx_notes_owner_status", "owner_id", "status"),
        Index("idx_notes_created_at", "created_at"),
    )


class NoteLink(Base):
    """A URL attached to a note, with optionally fetched page metadata."""

    __tablename__ = "note_links"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    note_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    og_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    note: Mapped[Note] = relationship(back_populates="links")

    __table_args__ = (Index("idx_note_links_note_id", "note_id"),)
