"""Single local user guarded by a 4-digit PIN."""

from __future__ import annotations

import uuid
from datetime import datetime

from flask_login import UserMixin
from sqlalchemy.orm import Mapped, mapped_column

from moodjournal.core.utils.dates import utc_now
from moodjournal.extensions import db


class User(db.Model, UserMixin):
    __tablename__ = "user"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # 0000-9999; callers always compare four-digit strings parsed to int.
    pin: Mapped[int] = mapped_column(db.Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"User(id={self.id!r})"
