"""Journal mappers for DTO responses."""

from __future__ import annotations

from datetime import date
from typing import Dict

from moodjournal.domains.journal.models import JournalEntry, Mood, Tag, mood_bucket, mood_color
from moodjournal.domains.journal.schemas.journal_schemas import (
    DashboardSummaryResponse,
    JournalEntryResponse,
    TagResponse,
)


def map_entry(entry: JournalEntry) -> dict:
    return JournalEntryResponse(
        id=entry.id,
        title=entry.title or "",
        description=entry.description or "",
        entry_date=entry.entry_date,
        primary_mood=entry.primary_mood,
        secondary_mood_1=entry.secondary_mood_1,
        secondary_mood_2=entry.secondary_mood_2,
        mood_bucket=mood_bucket(entry.primary_mood).value,
        mood_color=mood_color(entry.primary_mood),
        category=entry.category or "",
        tags=entry.tag_names,
        created_at=entry.created_at.isoformat() if entry.created_at else "",
        updated_at=entry.updated_at.isoformat() if entry.updated_at else "",
    ).model_dump(mode="json")


def map_tag(tag: Tag) -> dict:
    return TagResponse(
        id=tag.id,
        name=tag.name,
        is_prebuilt=tag.is_prebuilt,
        created_at=tag.created_at.isoformat() if tag.created_at else "",
    ).model_dump()


def map_mood_counts(counts: Dict[Mood, object]) -> dict:
    return {mood.value: value for mood, value in counts.items()}


def map_day_counts(counts: Dict[date, object]) -> dict:
    return {day.isoformat(): value for day, value in counts.items()}


def map_summary(summary: dict) -> dict:
    return DashboardSummaryResponse(
        current_streak=summary["current_streak"],
        longest_streak=summary["longest_streak"],
        total_entries=summary["total_entries"],
        mood_distribution=summary["mood_distribution"],
        most_frequent_mood=summary["most_frequent_mood"],
        mood_percentages=map_mood_counts(summary["mood_percentages"]),
        top_tags=summary["top_tags"],
        average_word_count=summary["average_word_count"],
    ).model_dump(mode="json")
