"""Access gate: single-user PIN setup, verification and change."""

from __future__ import annotations

import enum
import logging
from typing import Optional

from moodjournal.core.auth.models import User
from moodjournal.core.errors import InvalidPin, NoUser, UserExists, WrongPin
from moodjournal.core.utils.decorators import storage_operation
from moodjournal.extensions import db

logger = logging.getLogger(__name__)

PIN_LENGTH = 4
_ASCII_DIGITS = frozenset("0123456789")


class AuthMode(str, enum.Enum):
    SETUP_PIN = "setup_pin"
    LOGIN_PIN = "login_pin"


def is_valid_pin(pin: object) -> bool:
    return isinstance(pin, str) and len(pin) == PIN_LENGTH and all(ch in _ASCII_DIGITS for ch in pin)


def _require_pin(pin: object, label: str = "PIN") -> int:
    if not is_valid_pin(pin):
        raise InvalidPin(f"{label} must be {PIN_LENGTH} digits.")
    return int(pin)  # type: ignore[arg-type]


def get_user() -> Optional[User]:
    """Return the single user; the earliest-created one if several exist."""
    users = User.query.order_by(User.created_at.asc(), User.id.asc()).limit(2).all()
    if len(users) > 1:
        logger.warning("More than one user row found; using the earliest-created")
    return users[0] if users else None


@storage_operation("get_auth_mode")
def get_auth_mode() -> AuthMode:
    has_user = db.session.query(User.id).first() is not None
    return AuthMode.LOGIN_PIN if has_user else AuthMode.SETUP_PIN


@storage_operation("create_user_with_pin")
def create_user_with_pin(pin: str) -> User:
    pin_value = _require_pin(pin)
    if db.session.query(User.id).first() is not None:
        logger.warning("PIN setup rejected: user already exists")
        raise UserExists("User already exists.")
    user = User(pin=pin_value)
    db.session.add(user)
    db.session.commit()
    logger.info("Created local user %s", user.id)
    return user


@storage_operation("verify_pin")
def verify_pin(pin: str) -> bool:
    if not is_valid_pin(pin):
        return False
    user = get_user()
    return user is not None and user.pin == int(pin)


@storage_operation("change_pin")
def change_pin(current_pin: str, new_pin: str) -> User:
    current_value = _require_pin(current_pin, "Current PIN")
    new_value = _require_pin(new_pin, "New PIN")
    user = get_user()
    if user is None:
        raise NoUser("No user exists.")
    if user.pin != current_value:
        logger.warning("PIN change rejected: current PIN is incorrect")
        raise WrongPin("Current PIN is incorrect.")
    user.pin = new_value
    db.session.commit()
    logger.info("Changed PIN for user %s", user.id)
    return user
