"""Journal request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from moodjournal.domains.journal.models import Mood
from moodjournal.domains.journal.models.journal_entry import CATEGORY_MAX_LENGTH, TITLE_MAX_LENGTH
from moodjournal.domains.journal.models.tag import TAG_NAME_MAX_LENGTH


def _parse_mood(value):
    if value is None or value == "":
        return None
    return Mood.parse(value)


class JournalEntryWrite(BaseModel):
    title: str = Field(default="", max_length=TITLE_MAX_LENGTH)
    description: str = ""
    primary_mood: Mood
    secondary_mood_1: Optional[Mood] = None
    secondary_mood_2: Optional[Mood] = None
    category: str = Field(default="", max_length=CATEGORY_MAX_LENGTH)
    tags: Optional[List[str]] = None

    @field_validator("primary_mood", "secondary_mood_1", "secondary_mood_2", mode="before")
    @classmethod
    def parse_mood(cls, v):
        return _parse_mood(v)


class JournalEntryCreate(JournalEntryWrite):
    entry_date: Optional[date] = None


class JournalEntryUpdate(JournalEntryWrite):
    pass


class JournalEntryListFilter(BaseModel):
    q: Optional[str] = None
    title: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None
    mood: Optional[Mood] = None
    tag: List[str] = Field(default_factory=list)
    category: Optional[str] = None

    @field_validator("mood", mode="before")
    @classmethod
    def parse_mood(cls, v):
        return _parse_mood(v)


class DateRangeQuery(BaseModel):
    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "DateRangeQuery":
        if self.start > self.end:
            raise ValueError("start must not be after end")
        return self


class TopTagsQuery(DateRangeQuery):
    top_n: int = Field(default=10, ge=0, le=100)


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=TAG_NAME_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("tag name must not be blank")
        return v


class TagResponse(BaseModel):
    id: str
    name: str
    is_prebuilt: bool
    created_at: str


class JournalEntryResponse(BaseModel):
    id: str
    title: str
    description: str
    entry_date: date
    primary_mood: Mood
    secondary_mood_1: Optional[Mood]
    secondary_mood_2: Optional[Mood]
    mood_bucket: str
    mood_color: str
    category: str
    tags: List[str]
    created_at: str
    updated_at: str


class DashboardSummaryResponse(BaseModel):
    current_streak: int
    longest_streak: int
    total_entries: int
    mood_distribution: Dict[str, int]
    most_frequent_mood: Mood
    mood_percentages: Dict[str, float]
    top_tags: Dict[str, int]
    average_word_count: float
