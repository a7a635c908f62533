"""Storage bootstrap: schema creation and idempotent prebuilt-tag seeding."""

from __future__ import annotations

import logging

from moodjournal.core.utils.decorators import storage_operation
from moodjournal.domains.journal.models import Tag
from moodjournal.domains.journal.models.tag import tag_name_key
from moodjournal.domains.journal.services.tag_service import PREBUILT_TAG_NAMES
from moodjournal.extensions import db

logger = logging.getLogger(__name__)


@storage_operation("seed_prebuilt_tags")
def seed_prebuilt_tags() -> int:
    """Insert any prebuilt tag not yet present (ignoring case). Returns the count added."""
    existing = {key for (key,) in db.session.query(Tag.name_key).all()}
    added = 0
    for name in PREBUILT_TAG_NAMES:
        if tag_name_key(name) in existing:
            continue
        db.session.add(Tag(name=name, is_prebuilt=True))
        existing.add(tag_name_key(name))
        added += 1
    db.session.commit()
    if added:
        logger.info("Seeded %d prebuilt tags", added)
    return added


@storage_operation("initialize_storage")
def initialize_storage() -> int:
    """Create tables if missing, then seed prebuilt tags. Safe to call repeatedly."""
    # Register every model with the metadata before create_all.
    from moodjournal.core.auth import models as _auth_models  # noqa: F401
    from moodjournal.domains.journal import models as _journal_models  # noqa: F401

    db.create_all()
    return seed_prebuilt_tags()
