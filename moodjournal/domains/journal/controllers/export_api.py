"""PDF export JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import login_required

from moodjournal.domains.journal.services import export_service, journal_service

export_api_bp = Blueprint("export_api", __name__)


@export_api_bp.post("/entry/<string:entry_id>")
@login_required
def export_entry(entry_id: str):
    entry = journal_service.get_entry(entry_id)
    if not entry:
        return jsonify({"ok": False, "error": "not_found"}), 404
    path = export_service.export_entry(entry)
    return jsonify({"ok": True, "path": path})


@export_api_bp.post("/all")
@login_required
def export_all():
    entries = journal_service.get_all_entries()
    path = export_service.export_all(entries)
    return jsonify({"ok": True, "path": path, "count": len(entries)})
