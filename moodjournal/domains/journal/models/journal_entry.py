"""Journal entry: one per calendar day."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Mapped, mapped_column, relationship

from moodjournal.core.utils.dates import utc_now, utc_today
from moodjournal.domains.journal.models.mood import Mood
from moodjournal.domains.journal.models.tag import Tag
from moodjournal.extensions import db

TITLE_MAX_LENGTH = 200
CATEGORY_MAX_LENGTH = 100

_mood_type = db.Enum(
    Mood,
    name="mood",
    native_enum=False,
    length=16,
    values_callable=lambda enum_cls: [m.value for m in enum_cls],
    validate_strings=True,
)


class JournalEntry(db.Model):
    __tablename__ = "journal_entry"
    __table_args__ = (
        db.Index("ix_journal_entry_category", "category"),
        db.Index("ix_journal_entry_primary_mood", "primary_mood"),
    )

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(db.String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    entry_date: Mapped[date] = mapped_column(default=utc_today, nullable=False, unique=True, index=True)
    primary_mood: Mapped[Mood] = mapped_column(_mood_type, nullable=False)
    secondary_mood_1: Mapped[Optional[Mood]] = mapped_column(_mood_type)
    secondary_mood_2: Mapped[Optional[Mood]] = mapped_column(_mood_type)
    category: Mapped[str] = mapped_column(db.String(CATEGORY_MAX_LENGTH), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    tags: Mapped[List[Tag]] = relationship(
        Tag,
        secondary="journal_entry_tag",
        order_by=Tag.name,
        lazy="selectin",
        passive_deletes=True,
    )

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags]

    @property
    def secondary_moods(self) -> List[Mood]:
        return [m for m in (self.secondary_mood_1, self.secondary_mood_2) if m is not None]

    @property
    def moods(self) -> List[Mood]:
        """Non-empty mood slots in slot order (primary first)."""
        return [self.primary_mood, *self.secondary_moods]

    def __repr__(self) -> str:
        return f"JournalEntry(entry_date={self.entry_date}, title={self.title!r})"
