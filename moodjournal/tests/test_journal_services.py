"""Journal entry store tests.

Covers the service functions of the journal domain:
- create_entry / update_entry / delete_entry
- get_entry / get_entry_by_date / get_today_entry
- list_entries and the search/filter wrappers
- secondary mood and tag normalization
- streak and mood analytics shortcuts
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

pytestmark = pytest.mark.integration

from moodjournal.core.errors import DuplicateDateEntry, InvalidEntry
from moodjournal.core.utils.dates import utc_today
from moodjournal.domains.journal.models import JournalEntry, JournalEntryTag, Mood, Tag
from moodjournal.domains.journal.services import journal_service, tag_service
from moodjournal.extensions import db

DAY = date(2026, 3, 10)


def _create(entry_date=DAY, **overrides):
    fields = {
        "title": "A day",
        "description": "<p>Something happened.</p>",
        "primary_mood": Mood.HAPPY,
        "category": "Life",
    }
    fields.update(overrides)
    return journal_service.create_entry(entry_date=entry_date, **fields)


# ==================== Create Entry Tests ====================


def test_create_entry_persists_all_fields(app):
    """Should store every field and attach normalized tags."""
    entry = _create(
        title="Morning walk",
        description="<p>Sunny and quiet.</p>",
        primary_mood="Relaxed",
        secondary_mood_1=Mood.GRATEFUL,
        secondary_mood_2="calm",
        category="Outdoors",
        tag_names=["Nature", "  Fitness "],
    )

    loaded = journal_service.get_entry(entry.id)
    assert loaded is not None
    assert loaded.title == "Morning walk"
    assert loaded.description == "<p>Sunny and quiet.</p>"
    assert loaded.entry_date == DAY
    assert loaded.primary_mood is Mood.RELAXED
    assert loaded.secondary_mood_1 is Mood.GRATEFUL
    assert loaded.secondary_mood_2 is Mood.CALM
    assert loaded.category == "Outdoors"
    assert sorted(loaded.tag_names) == ["Fitness", "Nature"]
    assert loaded.created_at is not None
    assert loaded.updated_at is not None


def test_create_entry_defaults_to_today(app):
    """Without an entry date the entry lands on the current UTC day."""
    entry = _create(entry_date=None)
    assert entry.entry_date == utc_today()
    assert journal_service.get_today_entry().id == entry.id


def test_create_entry_truncates_datetime_to_day(app):
    """A datetime entry date is stored as its calendar day."""
    entry = _create(entry_date=datetime(2026, 3, 10, 23, 59, 30))
    assert entry.entry_date == DAY


def test_create_entry_same_day_different_time_rejected(app):
    """Second entry on the same calendar day fails whatever the time of day."""
    _create(entry_date=datetime(2026, 3, 10, 8, 0))
    with pytest.raises(DuplicateDateEntry) as excinfo:
        _create(entry_date=datetime(2026, 3, 10, 22, 30), title="Again")

    assert excinfo.value.entry_date == DAY
    assert journal_service.count_entries() == 1


def test_create_entry_blank_title_allowed(app):
    """An empty title is stored as empty text."""
    entry = _create(title="")
    assert journal_service.get_entry(entry.id).title == ""


def test_create_entry_title_too_long_rejected(app):
    """Titles over 200 characters are invalid."""
    with pytest.raises(InvalidEntry):
        _create(title="x" * 201)
    assert journal_service.count_entries() == 0


def test_create_entry_category_too_long_rejected(app):
    with pytest.raises(InvalidEntry):
        _create(category="c" * 101)


def test_create_entry_unknown_mood_rejected(app):
    """Moods outside the fixed set are invalid input."""
    with pytest.raises(InvalidEntry):
        _create(primary_mood="Ecstatic")
    with pytest.raises(InvalidEntry):
        _create(secondary_mood_1="Furious")


def test_create_entry_bad_tag_rolls_back_whole_entry(app):
    """A failing tag leaves neither the entry nor any new tag behind."""
    with pytest.raises(InvalidEntry):
        _create(tag_names=["Fine", "t" * 51])

    assert journal_service.get_entry_by_date(DAY) is None
    assert Tag.query.filter_by(name="Fine").first() is None


def test_create_entry_secondary_moods_deduplicated(app):
    """Repeated secondary moods collapse into the first slot."""
    entry = _create(secondary_mood_1=Mood.SAD, secondary_mood_2="Sad")
    assert entry.secondary_mood_1 is Mood.SAD
    assert entry.secondary_mood_2 is None


def test_create_entry_secondary_mood_shifts_into_first_slot(app):
    entry = _create(secondary_mood_1=None, secondary_mood_2=Mood.BORED)
    assert entry.secondary_mood_1 is Mood.BORED
    assert entry.secondary_mood_2 is None


# ==================== Tag Normalization Tests ====================


def test_create_entry_tag_normalization(app):
    """Tags are trimmed, blanks dropped and duplicates removed ignoring case."""
    entry = _create(tag_names=["  Travel ", "travel", "", "   ", "Beach"])

    assert sorted(entry.tag_names) == ["Beach", "Travel"]
    beach = Tag.query.filter_by(name="Beach").one()
    assert beach.is_prebuilt is False
    assert Tag.query.filter_by(name_key="travel").count() == 1


def test_create_entry_case_variants_share_one_tag(app):
    """["Work", " work ", "WORK"] yields one association to "Work"."""
    entry = _create(tag_names=["Work", " work ", "WORK"])
    db.session.expunge_all()

    assert journal_service.get_entry(entry.id).tag_names == ["Work"]
    assert JournalEntryTag.query.filter_by(entry_id=entry.id).count() == 1


def test_create_entry_reuses_custom_tag_with_non_ascii_case(app):
    """Lowercase "ärger" resolves to the existing "Ärger" tag."""
    tag_service.create_custom_tag("Ärger")
    entry = _create(tag_names=["ärger"])

    assert entry.tag_names == ["Ärger"]
    assert [t.name for t in tag_service.list_custom_tags()] == ["Ärger"]


def test_create_entry_reuses_prebuilt_tag_ignoring_case(app):
    """A differently cased name resolves to the existing prebuilt tag."""
    entry = _create(tag_names=["work"])
    assert entry.tag_names == ["Work"]
    assert Tag.query.filter_by(name_key="work").count() == 1


# ==================== Read Tests ====================


def test_get_entry_missing_returns_none(app):
    assert journal_service.get_entry("does-not-exist") is None


def test_get_entry_by_date_accepts_datetime(app):
    entry = _create()
    found = journal_service.get_entry_by_date(datetime(2026, 3, 10, 15, 45))
    assert found is not None and found.id == entry.id
    assert journal_service.get_entry_by_date(DAY + timedelta(days=1)) is None


def test_round_trip_preserves_fields(app):
    """Create then read back gives equal fields."""
    entry = _create(
        title="Round trip",
        description="<p>Body &amp; soul</p>",
        primary_mood=Mood.CURIOUS,
        secondary_mood_1=Mood.EXCITED,
        category="Ideas",
        tag_names=["Reading", "Writing"],
    )
    db.session.expunge_all()

    loaded = journal_service.get_entry(entry.id)
    assert (loaded.title, loaded.description, loaded.primary_mood, loaded.category) == (
        "Round trip",
        "<p>Body &amp; soul</p>",
        Mood.CURIOUS,
        "Ideas",
    )
    assert loaded.secondary_moods == [Mood.EXCITED]
    assert loaded.tag_names == ["Reading", "Writing"]


# ==================== Update Tests ====================


def test_update_entry_overwrites_fields_and_touches_updated_at(app):
    entry = _create(tag_names=["Work"])
    before = entry.updated_at

    updated = journal_service.update_entry(
        entry.id,
        title="Revised",
        description="<p>Changed</p>",
        primary_mood=Mood.STRESSED,
        category="Job",
        secondary_mood_1=Mood.ANXIOUS,
        tag_names=["Career"],
    )

    assert updated.title == "Revised"
    assert updated.primary_mood is Mood.STRESSED
    assert updated.secondary_mood_1 is Mood.ANXIOUS
    assert updated.category == "Job"
    assert updated.tag_names == ["Career"]
    assert updated.updated_at >= before
    assert updated.entry_date == DAY


def test_update_entry_tags_omitted_keeps_tags(app):
    """tag_names=None leaves the tag set untouched."""
    entry = _create(tag_names=["Work", "Music"])
    journal_service.update_entry(entry.id, "t", "d", Mood.CALM, "c", tag_names=None)
    db.session.expunge_all()
    assert journal_service.get_entry(entry.id).tag_names == ["Music", "Work"]


def test_update_entry_empty_tags_clears_tags(app):
    """An empty list removes every association."""
    entry = _create(tag_names=["Work", "Music"])
    journal_service.update_entry(entry.id, "t", "d", Mood.CALM, "c", tag_names=[])
    db.session.expunge_all()
    assert journal_service.get_entry(entry.id).tag_names == []
    assert JournalEntryTag.query.count() == 0


def test_update_entry_normalizes_secondary_moods(app):
    entry = _create()
    updated = journal_service.update_entry(
        entry.id, "t", "d", Mood.CALM, "c", secondary_mood_1="Lonely", secondary_mood_2=Mood.LONELY
    )
    assert updated.secondary_moods == [Mood.LONELY]


def test_update_entry_missing_returns_none(app):
    assert journal_service.update_entry("missing", "t", "d", Mood.CALM, "c") is None


# ==================== Delete Tests ====================


def test_delete_entry_removes_entry_and_associations(app):
    """Deleting an entry drops its tag links but keeps the tags."""
    entry = _create(tag_names=["Work", "Custom thing"])

    assert journal_service.delete_entry(entry.id) is True
    assert journal_service.get_entry(entry.id) is None
    assert JournalEntryTag.query.count() == 0
    assert Tag.query.filter_by(name="Custom thing").first() is not None


def test_delete_entry_missing_returns_false(app):
    assert journal_service.delete_entry("missing") is False


def test_delete_frees_the_day_for_a_new_entry(app):
    entry = _create()
    journal_service.delete_entry(entry.id)
    again = _create(title="Second try")
    assert again.entry_date == DAY


# ==================== Query Tests ====================


@pytest.fixture
def sample_entries(app):
    """Four entries across a week with mixed moods, tags and categories."""
    return [
        _create(
            entry_date=date(2026, 3, 1),
            title="Project kickoff",
            description="<p>Started the Garden plan.</p>",
            primary_mood=Mood.EXCITED,
            category="Work",
            tag_names=["Work", "Planning"],
        ),
        _create(
            entry_date=date(2026, 3, 3),
            title="Quiet evening",
            description="<p>Read a book about gardens.</p>",
            primary_mood=Mood.CALM,
            secondary_mood_1=Mood.EXCITED,
            category="Home",
            tag_names=["Reading"],
        ),
        _create(
            entry_date=date(2026, 3, 5),
            title="Deadline",
            description="<p>Too much to do.</p>",
            primary_mood=Mood.STRESSED,
            category="Work",
            tag_names=["Work"],
        ),
        _create(
            entry_date=date(2026, 3, 7),
            title="50% done",
            description="<p>Halfway there.</p>",
            primary_mood=Mood.CONFIDENT,
            category="Work",
            tag_names=["Work", "Planning", "Projects"],
        ),
    ]


def test_entries_sorted_newest_first(sample_entries):
    dates = [e.entry_date for e in journal_service.get_all_entries()]
    assert dates == sorted(dates, reverse=True)


def test_search_by_content_matches_title_or_description_ignoring_case(sample_entries):
    titles = [e.title for e in journal_service.search_by_content("GARDEN")]
    assert titles == ["Quiet evening", "Project kickoff"]


def test_search_by_content_empty_term_returns_all(sample_entries):
    assert len(journal_service.search_by_content("")) == 4


def test_search_escapes_like_wildcards(sample_entries):
    assert [e.title for e in journal_service.search_by_title("50%")] == ["50% done"]


def test_search_case_sensitive_setting(app, sample_entries):
    app.config["SEARCH_CASE_SENSITIVE"] = True
    assert journal_service.search_by_content("garden") == [sample_entries[1]]
    assert journal_service.search_by_title("deadline") == []


def test_search_by_title_only_checks_title(sample_entries):
    assert journal_service.search_by_title("book") == []
    assert [e.title for e in journal_service.search_by_title("quiet")] == ["Quiet evening"]


def test_search_ignores_case_outside_ascii(app):
    trip = _create(title="École trip", description="<p>Über den Fluss.</p>")
    assert journal_service.search_by_title("école") == [trip]
    assert journal_service.search_by_content("ÜBER") == [trip]

    app.config["SEARCH_CASE_SENSITIVE"] = True
    assert journal_service.search_by_title("école") == []
    assert journal_service.search_by_title("École") == [trip]


def test_get_by_date_range_is_inclusive(sample_entries):
    found = journal_service.get_by_date_range(date(2026, 3, 3), datetime(2026, 3, 5, 0, 0))
    assert [e.entry_date for e in found] == [date(2026, 3, 5), date(2026, 3, 3)]


def test_get_by_mood_matches_any_slot(sample_entries):
    found = journal_service.get_by_mood(Mood.EXCITED)
    assert [e.title for e in found] == ["Quiet evening", "Project kickoff"]


def test_get_by_mood_and_date_range(sample_entries):
    found = journal_service.get_by_mood_and_date_range("Excited", date(2026, 3, 2), date(2026, 3, 9))
    assert [e.title for e in found] == ["Quiet evening"]


def test_get_by_tag(sample_entries):
    assert [e.title for e in journal_service.get_by_tag("Reading")] == ["Quiet evening"]
    assert [e.title for e in journal_service.get_by_tag("reading")] == ["Quiet evening"]


def test_get_by_tags_requires_all(sample_entries):
    """Multiple tags narrow with AND semantics."""
    found = journal_service.get_by_tags(["Work", "Planning"])
    assert [e.title for e in found] == ["50% done", "Project kickoff"]
    assert [e.title for e in journal_service.get_by_tags(["Work", "Planning", "Projects"])] == ["50% done"]


def test_get_by_tags_empty_returns_all(sample_entries):
    assert len(journal_service.get_by_tags([])) == 4


def test_get_by_category_exact(sample_entries):
    assert len(journal_service.get_by_category("Work")) == 3
    assert journal_service.get_by_category("work") == []


def test_list_entries_combines_filters(sample_entries):
    found = journal_service.list_entries(
        category="Work",
        tags=["Planning"],
        date_from=date(2026, 3, 2),
    )
    assert [e.title for e in found] == ["50% done"]


def test_count_entries(sample_entries):
    assert journal_service.count_entries() == 4


# ==================== Analytics Shortcut Tests ====================


def test_get_daily_streak(app):
    today = date(2026, 4, 20)
    for offset in range(3):
        _create(entry_date=today - timedelta(days=offset), title=f"Day {offset}")
    _create(entry_date=today - timedelta(days=5), title="Older")

    assert journal_service.get_daily_streak(today) == 3
    assert journal_service.get_daily_streak(today + timedelta(days=1)) == 0


def test_get_mood_analytics_counts_every_slot(sample_entries):
    counts = journal_service.get_mood_analytics(date(2026, 3, 1), date(2026, 3, 3))
    assert counts == {Mood.EXCITED: 2, Mood.CALM: 1}


def test_entry_moods_helper(app):
    entry = _create(primary_mood=Mood.SAD, secondary_mood_1=Mood.LONELY)
    assert entry.moods == [Mood.SAD, Mood.LONELY]
    assert isinstance(entry, JournalEntry)
