"""Mood taxonomy and its fixed Positive/Neutral/Negative buckets."""

from __future__ import annotations

import enum
from typing import Dict


class Mood(str, enum.Enum):
    # Positive moods
    HAPPY = "Happy"
    EXCITED = "Excited"
    RELAXED = "Relaxed"
    GRATEFUL = "Grateful"
    CONFIDENT = "Confident"

    # Neutral moods
    CALM = "Calm"
    THOUGHTFUL = "Thoughtful"
    CURIOUS = "Curious"
    NOSTALGIC = "Nostalgic"
    BORED = "Bored"

    # Negative moods
    SAD = "Sad"
    ANGRY = "Angry"
    STRESSED = "Stressed"
    LONELY = "Lonely"
    ANXIOUS = "Anxious"

    @classmethod
    def parse(cls, value: "Mood | str") -> "Mood":
        """Accept a Mood, its value ("Happy") or its name ("HAPPY")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            cleaned = value.strip()
            for mood in cls:
                if cleaned.lower() in (mood.value.lower(), mood.name.lower()):
                    return mood
        raise ValueError(f"Unknown mood: {value!r}")

    @property
    def ordinal(self) -> int:
        return MOOD_ORDER[self]

    @property
    def bucket(self) -> "MoodBucket":
        return mood_bucket(self)


class MoodBucket(str, enum.Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


MOOD_ORDER: Dict[Mood, int] = {mood: index for index, mood in enumerate(Mood)}

_POSITIVE = {Mood.HAPPY, Mood.EXCITED, Mood.RELAXED, Mood.GRATEFUL, Mood.CONFIDENT}
_NEGATIVE = {Mood.SAD, Mood.ANGRY, Mood.STRESSED, Mood.LONELY, Mood.ANXIOUS}

MOOD_BUCKETS: Dict[Mood, MoodBucket] = {
    mood: (
        MoodBucket.POSITIVE if mood in _POSITIVE else MoodBucket.NEGATIVE if mood in _NEGATIVE else MoodBucket.NEUTRAL
    )
    for mood in Mood
}

BUCKET_COLORS: Dict[MoodBucket, str] = {
    MoodBucket.POSITIVE: "#43a047",
    MoodBucket.NEUTRAL: "#9e9e9e",
    MoodBucket.NEGATIVE: "#e53935",
}

DEFAULT_MOOD = Mood.CALM


def mood_bucket(mood: Mood) -> MoodBucket:
    return MOOD_BUCKETS[mood]


def mood_color(mood: Mood) -> str:
    return BUCKET_COLORS[mood_bucket(mood)]
