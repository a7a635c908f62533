"""Reusable decorators for controllers/services."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Callable, TypeVar

from flask import jsonify
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from moodjournal.core.errors import JournalError, OperationFailed
from moodjournal.extensions import db

F = TypeVar("F", bound=Callable)

logger = logging.getLogger(__name__)


def storage_operation(operation: str):
    """Run a service call as one unit of work against the session.

    Typed journal errors propagate unchanged; any other SQLAlchemy failure is
    rolled back and surfaced as OperationFailed with the original cause.
    """

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            try:
                return fn(*args, **kwargs)
            except JournalError:
                db.session.rollback()
                raise
            except SQLAlchemyError as exc:
                db.session.rollback()
                logger.exception("Storage failure during %s", operation)
                raise OperationFailed(operation, exc) from exc

        return wrapper  # type: ignore[return-value]

    return decorator


def validation_errors_as_json(fn: F) -> F:
    """Turn pydantic validation failures into a 400 JSON response."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        try:
            return fn(*args, **kwargs)
        except ValidationError as exc:
            details = exc.errors(include_url=False, include_context=False)
            return jsonify({"ok": False, "error": "validation_error", "details": details}), 400

    return wrapper  # type: ignore[return-value]
