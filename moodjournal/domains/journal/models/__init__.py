from moodjournal.domains.journal.models.journal_entry import JournalEntry
from moodjournal.domains.journal.models.mood import DEFAULT_MOOD, Mood, MoodBucket, mood_bucket, mood_color
from moodjournal.domains.journal.models.tag import JournalEntryTag, Tag

__all__ = [
    "DEFAULT_MOOD",
    "JournalEntry",
    "JournalEntryTag",
    "Mood",
    "MoodBucket",
    "Tag",
    "mood_bucket",
    "mood_color",
]
