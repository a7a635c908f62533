"""Journal services: one entry per calendar day, tags, queries and analytics shortcuts."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple, Union

from flask import current_app
from sqlalchemy import delete, func, or_
from sqlalchemy.exc import IntegrityError

from moodjournal.core.errors import DuplicateDateEntry, InvalidEntry
from moodjournal.core.utils.dates import day_range, to_day, utc_now, utc_today
from moodjournal.core.utils.decorators import storage_operation
from moodjournal.domains.journal.models import JournalEntry, JournalEntryTag, Mood, Tag
from moodjournal.domains.journal.models.journal_entry import CATEGORY_MAX_LENGTH, TITLE_MAX_LENGTH
from moodjournal.domains.journal.models.tag import tag_name_key
from moodjournal.domains.journal.services import analytics_service
from moodjournal.domains.journal.services.tag_service import get_or_create_tag, normalize_tag_names
from moodjournal.extensions import db

logger = logging.getLogger(__name__)

MoodInput = Optional[Union[Mood, str]]


@storage_operation("create_entry")
def create_entry(
    title: str,
    description: str,
    primary_mood: Mood | str,
    category: str,
    secondary_mood_1: MoodInput = None,
    secondary_mood_2: MoodInput = None,
    tag_names: Optional[Iterable[str]] = None,
    entry_date: date | datetime | None = None,
) -> JournalEntry:
    day = to_day(entry_date)
    if _entry_exists(day):
        logger.warning("Rejected second entry for %s", day)
        raise DuplicateDateEntry(day)

    fields = _entry_fields(title, description, primary_mood, category, secondary_mood_1, secondary_mood_2)
    now = utc_now()
    entry = JournalEntry(entry_date=day, created_at=now, updated_at=now, **fields)
    try:
        db.session.add(entry)
        db.session.flush()
        entry.tags = [get_or_create_tag(name) for name in normalize_tag_names(tag_names)]
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if _entry_exists(day):
            raise DuplicateDateEntry(day) from exc
        raise
    logger.info("Created journal entry %s for %s with %d tag(s)", entry.id, day, len(entry.tags))
    return entry


@storage_operation("get_entry")
def get_entry(entry_id: str) -> Optional[JournalEntry]:
    return db.session.get(JournalEntry, entry_id)


@storage_operation("get_entry_by_date")
def get_entry_by_date(entry_date: date | datetime) -> Optional[JournalEntry]:
    return JournalEntry.query.filter_by(entry_date=to_day(entry_date)).first()


def get_today_entry() -> Optional[JournalEntry]:
    return get_entry_by_date(utc_today())


@storage_operation("update_entry")
def update_entry(
    entry_id: str,
    title: str,
    description: str,
    primary_mood: Mood | str,
    category: str,
    secondary_mood_1: MoodInput = None,
    secondary_mood_2: MoodInput = None,
    tag_names: Optional[Iterable[str]] = None,
) -> Optional[JournalEntry]:
    """Overwrite an entry's fields.

    ``tag_names=None`` keeps the current tags; any list (even empty) replaces them.
    """
    entry = db.session.get(JournalEntry, entry_id)
    if entry is None:
        return None
    fields = _entry_fields(title, description, primary_mood, category, secondary_mood_1, secondary_mood_2)
    for key, value in fields.items():
        setattr(entry, key, value)
    entry.updated_at = utc_now()
    if tag_names is not None:
        entry.tags = [get_or_create_tag(name) for name in normalize_tag_names(tag_names)]
    db.session.commit()
    logger.info("Updated journal entry %s", entry.id)
    return entry


@storage_operation("delete_entry")
def delete_entry(entry_id: str) -> bool:
    # Associations first, then the entry; the FK cascade covers the same rows.
    db.session.execute(delete(JournalEntryTag).where(JournalEntryTag.entry_id == entry_id))
    result = db.session.execute(delete(JournalEntry).where(JournalEntry.id == entry_id))
    db.session.commit()
    deleted = bool(result.rowcount)
    if deleted:
        logger.info("Deleted journal entry %s", entry_id)
    return deleted


@storage_operation("list_entries")
def list_entries(
    *,
    search_text: Optional[str] = None,
    title: Optional[str] = None,
    date_from: date | datetime | None = None,
    date_to: date | datetime | None = None,
    mood: MoodInput = None,
    tags: Optional[Iterable[str]] = None,
    category: Optional[str] = None,
) -> List[JournalEntry]:
    """Entries matching every given filter, newest entry date first.

    ``tags`` uses AND semantics: an entry must carry all listed tag names.
    """
    query = JournalEntry.query
    if date_from is not None:
        query = query.filter(JournalEntry.entry_date >= to_day(date_from))
    if date_to is not None:
        _, upper = day_range(date_to, date_to)
        query = query.filter(JournalEntry.entry_date < upper)
    if mood is not None:
        wanted = _coerce_mood(mood)
        query = query.filter(
            or_(
                JournalEntry.primary_mood == wanted,
                JournalEntry.secondary_mood_1 == wanted,
                JournalEntry.secondary_mood_2 == wanted,
            )
        )
    for tag_name in tags or []:
        query = query.filter(JournalEntry.tags.any(Tag.name_key == tag_name_key(tag_name)))
    if category is not None:
        query = query.filter(JournalEntry.category == category)

    entries = query.order_by(JournalEntry.entry_date.desc()).all()
    if search_text:
        entries = [e for e in entries if _text_matches(search_text, e.title, e.description)]
    if title:
        entries = [e for e in entries if _text_matches(title, e.title)]
    return entries


def get_all_entries() -> List[JournalEntry]:
    return list_entries()


def search_by_content(term: str) -> List[JournalEntry]:
    if not term:
        return get_all_entries()
    return list_entries(search_text=term)


def search_by_title(term: str) -> List[JournalEntry]:
    if not term:
        return get_all_entries()
    return list_entries(title=term)


def get_by_date_range(start: date | datetime, end: date | datetime) -> List[JournalEntry]:
    return list_entries(date_from=start, date_to=end)


def get_by_mood(mood: Mood | str) -> List[JournalEntry]:
    return list_entries(mood=mood)


def get_by_mood_and_date_range(mood: Mood | str, start: date | datetime, end: date | datetime) -> List[JournalEntry]:
    return list_entries(mood=mood, date_from=start, date_to=end)


def get_by_tag(tag_name: str) -> List[JournalEntry]:
    return list_entries(tags=[tag_name])


def get_by_tags(tag_names: Iterable[str]) -> List[JournalEntry]:
    return list_entries(tags=list(tag_names))


def get_by_category(category: str) -> List[JournalEntry]:
    return list_entries(category=category)


@storage_operation("count_entries")
def count_entries() -> int:
    return db.session.query(func.count(JournalEntry.id)).scalar() or 0


def get_daily_streak(today: Optional[date] = None) -> int:
    return analytics_service.get_current_streak(today)


def get_mood_analytics(start: date | datetime, end: date | datetime) -> Dict[Mood, int]:
    """Raw per-mood counts over all slots of entries in range."""
    return analytics_service.get_mood_counts(start, end)


def normalize_secondary_moods(*moods: MoodInput) -> Tuple[Optional[Mood], Optional[Mood]]:
    """Drop empties and repeats (first slot wins) and keep at most two."""
    kept: List[Mood] = []
    for value in moods:
        if value is None or value == "":
            continue
        mood = _coerce_mood(value)
        if mood not in kept:
            kept.append(mood)
    kept = kept[:2]
    return (kept[0] if kept else None, kept[1] if len(kept) > 1 else None)


def _entry_exists(day: date) -> bool:
    return db.session.query(JournalEntry.id).filter(JournalEntry.entry_date == day).first() is not None


def _text_matches(term: str, *fields: Optional[str]) -> bool:
    """Substring test, case folded unless SEARCH_CASE_SENSITIVE is set."""
    if current_app.config.get("SEARCH_CASE_SENSITIVE", False):
        return any(term in (field or "") for field in fields)
    folded = term.casefold()
    return any(folded in (field or "").casefold() for field in fields)


def _coerce_mood(value) -> Mood:
    try:
        return Mood.parse(value)
    except ValueError as exc:
        raise InvalidEntry(str(exc)) from exc


def _entry_fields(title, description, primary_mood, category, secondary_mood_1, secondary_mood_2) -> dict:
    if primary_mood is None or primary_mood == "":
        raise InvalidEntry("Primary mood is required.")
    title_norm = title or ""
    if len(title_norm) > TITLE_MAX_LENGTH:
        raise InvalidEntry(f"Title must be at most {TITLE_MAX_LENGTH} characters.")
    category_norm = category or ""
    if len(category_norm) > CATEGORY_MAX_LENGTH:
        raise InvalidEntry(f"Category must be at most {CATEGORY_MAX_LENGTH} characters.")
    secondary_1, secondary_2 = normalize_secondary_moods(secondary_mood_1, secondary_mood_2)
    return {
        "title": title_norm,
        "description": description or "",
        "primary_mood": _coerce_mood(primary_mood),
        "secondary_mood_1": secondary_1,
        "secondary_mood_2": secondary_2,
        "category": category_norm,
    }
