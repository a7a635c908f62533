"""Access gate HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, login_user, logout_user

from moodjournal.core.auth import pin_service
from moodjournal.core.auth.schemas import PinChangeRequest, PinRequest
from moodjournal.core.utils.decorators import validation_errors_as_json
from moodjournal.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


def _pin_rate_limit() -> str:
    return current_app.config.get("PIN_RATE_LIMIT", "10 per minute")


@auth_bp.get("/mode")
def auth_mode():
    return jsonify({"ok": True, "mode": pin_service.get_auth_mode().value})


@auth_bp.post("/pin/setup")
@limiter.limit(_pin_rate_limit)
@validation_errors_as_json
def setup_pin():
    data = PinRequest.model_validate(request.get_json(silent=True) or {})
    user = pin_service.create_user_with_pin(data.pin)
    login_user(user)
    return jsonify({"ok": True}), 201


@auth_bp.post("/pin/verify")
@limiter.limit(_pin_rate_limit)
@validation_errors_as_json
def verify_pin():
    data = PinRequest.model_validate(request.get_json(silent=True) or {})
    if not pin_service.verify_pin(data.pin):
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    login_user(pin_service.get_user())
    return jsonify({"ok": True})


@auth_bp.post("/pin/change")
@login_required
@limiter.limit(_pin_rate_limit)
@validation_errors_as_json
def change_pin():
    data = PinChangeRequest.model_validate(request.get_json(silent=True) or {})
    pin_service.change_pin(data.current_pin, data.new_pin)
    return jsonify({"ok": True})


@auth_bp.post("/logout")
def logout():
    logout_user()
    return jsonify({"ok": True})
