"""Tag catalog: prebuilt and user-created tags with case-insensitive names."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from moodjournal.core.errors import DuplicateTag, InvalidEntry
from moodjournal.core.utils.decorators import storage_operation
from moodjournal.domains.journal.models import Tag
from moodjournal.domains.journal.models.tag import TAG_NAME_MAX_LENGTH, tag_name_key
from moodjournal.extensions import db

logger = logging.getLogger(__name__)

PREBUILT_TAG_NAMES = (
    "Work", "Career", "Studies", "Family", "Friends", "Relationships",
    "Health", "Fitness", "Personal Growth", "Self-care", "Hobbies", "Travel",
    "Nature", "Finance", "Spirituality", "Birthday", "Holiday", "Vacation",
    "Celebration", "Exercise", "Reading", "Writing", "Cooking", "Meditation",
    "Yoga", "Music", "Shopping", "Parenting", "Projects", "Planning", "Reflection",
)  # fmt: skip


def normalize_tag_names(names: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop blanks and dedupe ignoring case; the first-seen spelling wins."""
    seen = set()
    normalized: List[str] = []
    for raw in names or []:
        if raw is None:
            continue
        name = str(raw).strip()
        if not name:
            continue
        key = tag_name_key(name)
        if key in seen:
            continue
        seen.add(key)
        normalized.append(name)
    return normalized


def _validate_name(name: str) -> str:
    name_norm = (name or "").strip()
    if not name_norm:
        raise InvalidEntry("Tag name must not be blank.")
    if len(name_norm) > TAG_NAME_MAX_LENGTH:
        raise InvalidEntry(f"Tag name must be at most {TAG_NAME_MAX_LENGTH} characters.")
    return name_norm


def _find_ignoring_case(name: str) -> Optional[Tag]:
    return Tag.query.filter(Tag.name_key == tag_name_key(name)).first()


@storage_operation("list_prebuilt_tags")
def list_prebuilt_tags() -> List[Tag]:
    return Tag.query.filter_by(is_prebuilt=True).order_by(Tag.name.asc()).all()


@storage_operation("list_custom_tags")
def list_custom_tags() -> List[Tag]:
    return Tag.query.filter_by(is_prebuilt=False).order_by(Tag.name.asc()).all()


@storage_operation("list_all_tags")
def list_all_tags() -> List[Tag]:
    return Tag.query.order_by(Tag.name.asc()).all()


@storage_operation("get_tag_by_name")
def get_tag_by_name(name: str) -> Optional[Tag]:
    return _find_ignoring_case((name or "").strip())


def _add_custom_tag(name: str) -> Tag:
    name_norm = _validate_name(name)
    if _find_ignoring_case(name_norm) is not None:
        logger.warning("Rejected duplicate tag %r", name_norm)
        raise DuplicateTag(name_norm)
    tag = Tag(name=name_norm, is_prebuilt=False)
    db.session.add(tag)
    db.session.flush()
    return tag


@storage_operation("create_custom_tag")
def create_custom_tag(name: str) -> Tag:
    tag = _add_custom_tag(name)
    db.session.commit()
    logger.info("Created custom tag %r", tag.name)
    return tag


def get_or_create_tag(name: str) -> Tag:
    """Resolve a tag for an entry write inside the caller's unit of work.

    An exact name match wins; otherwise a tag differing only in case is reused
    so names stay unique; otherwise a new custom tag is added (not committed).
    """
    name_norm = _validate_name(name)
    tag = Tag.query.filter(Tag.name == name_norm).first()
    if tag is None:
        tag = _find_ignoring_case(name_norm)
    if tag is None:
        tag = _add_custom_tag(name_norm)
    return tag
