"""Streak and analytics engine.

Read-only aggregation over persisted entries. The arithmetic lives in pure
helpers (``current_streak``, ``longest_streak``, ``count_moods`` ...) that take
plain dates/moods, so the journal store and the analytics endpoints share one
implementation. Every date range is whole calendar days: ``[start, end]`` is
queried as ``[start, end + 1 day)``.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func

from moodjournal.core.utils.dates import day_range, iter_days, to_day, utc_today
from moodjournal.core.utils.decorators import storage_operation
from moodjournal.core.utils.markup import count_words
from moodjournal.domains.journal.models import DEFAULT_MOOD, JournalEntry, JournalEntryTag, Mood, MoodBucket, Tag
from moodjournal.domains.journal.models.mood import MOOD_ORDER, mood_bucket
from moodjournal.extensions import db

DEFAULT_TOP_TAGS = 10

MoodSlots = Tuple[Mood, Optional[Mood], Optional[Mood]]


# ---------------------------------------------------------------------------
# Pure computations
# ---------------------------------------------------------------------------


def current_streak(entry_dates: Iterable[date], today: Optional[date] = None) -> int:
    """Consecutive days ending today; 0 when there is no entry for today."""
    days = sorted(set(entry_dates), reverse=True)
    today = today or utc_today()
    if not days or days[0] != today:
        return 0
    streak = 1
    for newer, older in zip(days, days[1:]):
        if newer - older != timedelta(days=1):
            break
        streak += 1
    return streak


def longest_streak(entry_dates: Iterable[date]) -> int:
    days = sorted(set(entry_dates))
    if not days:
        return 0
    best = current = 1
    for older, newer in zip(days, days[1:]):
        if newer - older == timedelta(days=1):
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best


def missed_days(entry_dates: Iterable[date], start: date, end: date) -> List[date]:
    """Days in ``[start, end]`` without an entry, ascending."""
    written = set(entry_dates)
    return [day for day in iter_days(start, end) if day not in written]


def count_moods(rows: Iterable[Sequence[Optional[Mood]]]) -> Dict[Mood, int]:
    """Occurrences per mood across every filled slot, in first-seen order."""
    counts: Dict[Mood, int] = {}
    for slots in rows:
        for mood in slots:
            if mood is not None:
                counts[mood] = counts.get(mood, 0) + 1
    return counts


def bucket_distribution(counts: Dict[Mood, int]) -> Dict[str, int]:
    distribution = {bucket.value: 0 for bucket in MoodBucket}
    for mood, count in counts.items():
        distribution[mood_bucket(mood).value] += count
    return distribution


def most_frequent_mood(counts: Dict[Mood, int]) -> Mood:
    """Highest count wins; ties go to the lowest Mood ordinal. Empty -> Calm."""
    if not counts:
        return DEFAULT_MOOD
    return min(counts, key=lambda mood: (-counts[mood], MOOD_ORDER[mood]))


def mood_percentages(counts: Dict[Mood, int]) -> Dict[Mood, float]:
    total = sum(counts.values())
    if total == 0:
        return {}
    ordered = sorted(counts.items(), key=lambda item: (-item[1], MOOD_ORDER[item[0]]))
    return {mood: round(count / total * 100, 2) for mood, count in ordered}


def average_word_count(descriptions: Iterable[str]) -> float:
    counts = [count_words(text) for text in descriptions]
    if not counts:
        return 0
    return round(sum(counts) / len(counts), 2)


def word_count_trends(rows: Iterable[Tuple[date, str]]) -> Dict[date, float]:
    """Average word count per day, ascending by day."""
    per_day: Dict[date, List[int]] = {}
    for day, description in rows:
        per_day.setdefault(to_day(day), []).append(count_words(description))
    return {day: round(sum(values) / len(values), 2) for day, values in sorted(per_day.items())}


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def _in_range(query, start: date | datetime, end: date | datetime):
    lower, upper = day_range(start, end)
    return query.filter(JournalEntry.entry_date >= lower, JournalEntry.entry_date < upper)


def _all_entry_dates() -> List[date]:
    return [row[0] for row in db.session.query(JournalEntry.entry_date).distinct().all()]


def _mood_rows(start: date | datetime, end: date | datetime) -> List[MoodSlots]:
    query = db.session.query(
        JournalEntry.primary_mood,
        JournalEntry.secondary_mood_1,
        JournalEntry.secondary_mood_2,
    )
    query = _in_range(query, start, end).order_by(JournalEntry.entry_date.asc())
    return [tuple(row) for row in query.all()]


def _description_rows(start: date | datetime, end: date | datetime) -> List[Tuple[date, str]]:
    query = db.session.query(JournalEntry.entry_date, JournalEntry.description)
    query = _in_range(query, start, end).order_by(JournalEntry.entry_date.asc())
    return [(row[0], row[1]) for row in query.all()]


def _tag_counts(start: date | datetime, end: date | datetime, limit: Optional[int]) -> List[Tuple[str, int]]:
    lower, upper = day_range(start, end)
    usage = func.count(JournalEntryTag.entry_id)
    query = (
        db.session.query(Tag.name, usage.label("uses"))
        .join(JournalEntryTag, JournalEntryTag.tag_id == Tag.id)
        .join(JournalEntry, JournalEntry.id == JournalEntryTag.entry_id)
        .filter(JournalEntry.entry_date >= lower, JournalEntry.entry_date < upper)
        .group_by(Tag.name)
        .order_by(usage.desc(), Tag.name.asc())
    )
    if limit is not None:
        query = query.limit(limit)
    return [(name, int(count)) for name, count in query.all()]


@storage_operation("get_current_streak")
def get_current_streak(today: Optional[date] = None) -> int:
    return current_streak(_all_entry_dates(), today)


@storage_operation("get_longest_streak")
def get_longest_streak() -> int:
    return longest_streak(_all_entry_dates())


@storage_operation("get_missed_days")
def get_missed_days(start: date | datetime, end: date | datetime) -> List[date]:
    query = _in_range(db.session.query(JournalEntry.entry_date), start, end)
    return missed_days((row[0] for row in query.all()), to_day(start), to_day(end))


@storage_operation("get_mood_counts")
def get_mood_counts(start: date | datetime, end: date | datetime) -> Dict[Mood, int]:
    return count_moods(_mood_rows(start, end))


@storage_operation("get_mood_distribution")
def get_mood_distribution(start: date | datetime, end: date | datetime) -> Dict[str, int]:
    return bucket_distribution(count_moods(_mood_rows(start, end)))


@storage_operation("get_most_frequent_mood")
def get_most_frequent_mood(start: date | datetime, end: date | datetime) -> Mood:
    return most_frequent_mood(count_moods(_mood_rows(start, end)))


@storage_operation("get_mood_percentages")
def get_mood_percentages(start: date | datetime, end: date | datetime) -> Dict[Mood, float]:
    return mood_percentages(count_moods(_mood_rows(start, end)))


@storage_operation("get_most_used_tags")
def get_most_used_tags(start: date | datetime, end: date | datetime, top_n: int = DEFAULT_TOP_TAGS) -> Dict[str, int]:
    if top_n <= 0:
        return {}
    return dict(_tag_counts(start, end, top_n))


@storage_operation("get_tag_percentages")
def get_tag_percentages(start: date | datetime, end: date | datetime) -> Dict[str, float]:
    """Share of entries in range carrying each tag (top 10 by count)."""
    total = _in_range(db.session.query(func.count(JournalEntry.id)), start, end).scalar() or 0
    if total == 0:
        return {}
    return {name: round(count / total * 100, 2) for name, count in _tag_counts(start, end, DEFAULT_TOP_TAGS)}


@storage_operation("get_total_entries")
def get_total_entries(start: date | datetime, end: date | datetime) -> int:
    return _in_range(db.session.query(func.count(JournalEntry.id)), start, end).scalar() or 0


@storage_operation("get_average_word_count")
def get_average_word_count(start: date | datetime, end: date | datetime) -> float:
    return average_word_count(description for _, description in _description_rows(start, end))


@storage_operation("get_word_count_trends")
def get_word_count_trends(start: date | datetime, end: date | datetime) -> Dict[date, float]:
    return word_count_trends(_description_rows(start, end))


@storage_operation("get_entries_per_day")
def get_entries_per_day(start: date | datetime, end: date | datetime) -> Dict[date, int]:
    query = _in_range(db.session.query(JournalEntry.entry_date), start, end)
    counts = Counter(to_day(row[0]) for row in query.all())
    return dict(sorted(counts.items()))


@storage_operation("get_dashboard_summary")
def get_dashboard_summary(start: date | datetime, end: date | datetime, today: Optional[date] = None) -> dict:
    dates = _all_entry_dates()
    counts = count_moods(_mood_rows(start, end))
    descriptions = _description_rows(start, end)
    return {
        "current_streak": current_streak(dates, today),
        "longest_streak": longest_streak(dates),
        "total_entries": len(descriptions),
        "mood_distribution": bucket_distribution(counts),
        "most_frequent_mood": most_frequent_mood(counts),
        "mood_percentages": mood_percentages(counts),
        "top_tags": dict(_tag_counts(start, end, DEFAULT_TOP_TAGS)),
        "average_word_count": average_word_count(text for _, text in descriptions),
    }
