"""Reusable tags and the entry-tag association."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, validates

from moodjournal.core.utils.dates import utc_now
from moodjournal.extensions import db

TAG_NAME_MAX_LENGTH = 50
# Case folding can expand a character ("ß" -> "ss").
TAG_NAME_KEY_MAX_LENGTH = TAG_NAME_MAX_LENGTH * 3


def _new_id() -> str:
    return str(uuid.uuid4())


def tag_name_key(name: str) -> str:
    """Comparison key for tag names: trimmed and case folded."""
    return (name or "").strip().casefold()


class Tag(db.Model):
    __tablename__ = "tag"
    __table_args__ = (
        db.Index("ix_tag_is_prebuilt_name", "is_prebuilt", "name"),
        # Names are unique ignoring case.
        db.Index("uq_tag_name_key", "name_key", unique=True),
    )

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(db.String(TAG_NAME_MAX_LENGTH), nullable=False)
    name_key: Mapped[str] = mapped_column(db.String(TAG_NAME_KEY_MAX_LENGTH), nullable=False)
    is_prebuilt: Mapped[bool] = mapped_column(default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    @validates("name")
    def _sync_name_key(self, _key, value):
        self.name_key = tag_name_key(value)
        return value

    def __repr__(self) -> str:
        return f"Tag(name={self.name!r}, is_prebuilt={self.is_prebuilt})"


class JournalEntryTag(db.Model):
    """Association row; deleting either side removes it."""

    __tablename__ = "journal_entry_tag"

    entry_id: Mapped[str] = mapped_column(
        db.String(36), db.ForeignKey("journal_entry.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[str] = mapped_column(
        db.String(36), db.ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True, index=True
    )
