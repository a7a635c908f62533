"""Tag catalog JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import login_required

from moodjournal.core.utils.decorators import validation_errors_as_json
from moodjournal.domains.journal.mappers import map_tag
from moodjournal.domains.journal.schemas.journal_schemas import TagCreate
from moodjournal.domains.journal.services import tag_service

tag_api_bp = Blueprint("tag_api", __name__)


@tag_api_bp.get("")
@login_required
def list_tags():
    return jsonify({"ok": True, "items": [map_tag(t) for t in tag_service.list_all_tags()]})


@tag_api_bp.get("/prebuilt")
@login_required
def list_prebuilt():
    return jsonify({"ok": True, "items": [map_tag(t) for t in tag_service.list_prebuilt_tags()]})


@tag_api_bp.get("/custom")
@login_required
def list_custom():
    return jsonify({"ok": True, "items": [map_tag(t) for t in tag_service.list_custom_tags()]})


@tag_api_bp.post("")
@login_required
@validation_errors_as_json
def create_tag():
    data = TagCreate.model_validate(request.get_json(silent=True) or {})
    tag = tag_service.create_custom_tag(data.name)
    return jsonify({"ok": True, "tag": map_tag(tag)}), 201
