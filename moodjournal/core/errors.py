"""
MoodJournal error taxonomy.

Every typed failure inherits from JournalError so callers can catch the whole
family while still telling "no such entry" (a None/False result, never an
exception) apart from invariant violations and storage failures.
"""

from __future__ import annotations

from datetime import date


class JournalError(Exception):
    """Base exception class for all journal errors."""


class InvalidEntry(JournalError, ValueError):
    """Raised for malformed entry or tag input (unknown mood, blank title)."""


class InvalidPin(JournalError, ValueError):
    """Raised when a PIN is not exactly four ASCII digits."""


class DuplicateDateEntry(JournalError):
    """Raised when an entry already exists for the calendar day."""

    def __init__(self, entry_date: date):
        self.entry_date = entry_date
        super().__init__(f"An entry already exists for date {entry_date.isoformat()}.")


class DuplicateTag(JournalError):
    """Raised when a tag with the same name (ignoring case) already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tag '{name}' already exists.")


class UserExists(JournalError):
    """Raised when PIN setup is attempted but a user is already registered."""


class NoUser(JournalError):
    """Raised when a PIN change is attempted before any user exists."""


class WrongPin(JournalError):
    """Raised when the current PIN does not match the stored one."""


class OperationFailed(JournalError):
    """Raised for unexpected storage failures, carrying the operation name."""

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        message = f"Error during {operation}."
        if cause is not None:
            message = f"{message} {type(cause).__name__}: {cause}"
        super().__init__(message)


class ExportFailed(JournalError):
    """Raised when rendering or writing an export fails."""

    def __init__(self, context: str, cause: BaseException | None = None):
        self.context = context
        self.cause = cause
        message = f"Failed to export {context} to PDF."
        if cause is not None:
            message = f"{message} {cause}"
        super().__init__(message)


class ExportCancelled(JournalError):
    """Raised from an export job that was cancelled before its file was written."""

    def __init__(self, context: str):
        self.context = context
        super().__init__(f"Export of {context} was cancelled.")
