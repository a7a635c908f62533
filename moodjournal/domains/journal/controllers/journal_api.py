"""Journal JSON API."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify, request
from flask_login import login_required

from moodjournal.core.utils.decorators import validation_errors_as_json
from moodjournal.domains.journal.mappers import map_entry, map_mood_counts
from moodjournal.domains.journal.schemas.journal_schemas import (
    DateRangeQuery,
    JournalEntryCreate,
    JournalEntryListFilter,
    JournalEntryUpdate,
)
from moodjournal.domains.journal.services import journal_service

journal_api_bp = Blueprint("journal_api", __name__)


@journal_api_bp.get("")
@login_required
@validation_errors_as_json
def list_journal():
    args = request.args.to_dict()
    args["tag"] = request.args.getlist("tag")
    filters = JournalEntryListFilter.model_validate(args)
    entries = journal_service.list_entries(
        search_text=filters.q,
        title=filters.title,
        date_from=filters.start,
        date_to=filters.end,
        mood=filters.mood,
        tags=filters.tag,
        category=filters.category,
    )
    return jsonify({"ok": True, "items": [map_entry(e) for e in entries], "total": len(entries)})


@journal_api_bp.get("/today")
@login_required
def get_today():
    entry = journal_service.get_today_entry()
    return jsonify({"ok": True, "entry": map_entry(entry) if entry else None})


@journal_api_bp.get("/date/<string:day>")
@login_required
def get_by_date(day: str):
    try:
        entry_date = date.fromisoformat(day)
    except ValueError:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    entry = journal_service.get_entry_by_date(entry_date)
    if not entry:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "entry": map_entry(entry)})


@journal_api_bp.get("/streak")
@login_required
def get_streak():
    return jsonify({"ok": True, "streak": journal_service.get_daily_streak()})


@journal_api_bp.get("/mood-analytics")
@login_required
@validation_errors_as_json
def get_mood_analytics():
    query = DateRangeQuery.model_validate(request.args.to_dict())
    counts = journal_service.get_mood_analytics(query.start, query.end)
    return jsonify({"ok": True, "moods": map_mood_counts(counts)})


@journal_api_bp.get("/<string:entry_id>")
@login_required
def get_entry(entry_id: str):
    entry = journal_service.get_entry(entry_id)
    if not entry:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "entry": map_entry(entry)})


@journal_api_bp.post("")
@login_required
@validation_errors_as_json
def create_journal_entry():
    data = JournalEntryCreate.model_validate(request.get_json(silent=True) or {})
    entry = journal_service.create_entry(
        title=data.title,
        description=data.description,
        primary_mood=data.primary_mood,
        category=data.category,
        secondary_mood_1=data.secondary_mood_1,
        secondary_mood_2=data.secondary_mood_2,
        tag_names=data.tags,
        entry_date=data.entry_date,
    )
    return jsonify({"ok": True, "entry": map_entry(entry)}), 201


@journal_api_bp.put("/<string:entry_id>")
@login_required
@validation_errors_as_json
def update_journal_entry(entry_id: str):
    data = JournalEntryUpdate.model_validate(request.get_json(silent=True) or {})
    entry = journal_service.update_entry(
        entry_id,
        title=data.title,
        description=data.description,
        primary_mood=data.primary_mood,
        category=data.category,
        secondary_mood_1=data.secondary_mood_1,
        secondary_mood_2=data.secondary_mood_2,
        tag_names=data.tags,
    )
    if not entry:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "entry": map_entry(entry)})


@journal_api_bp.delete("/<string:entry_id>")
@login_required
def delete_journal_entry(entry_id: str):
    deleted = journal_service.delete_entry(entry_id)
    if not deleted:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
