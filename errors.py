# ─────────────────────────────────────────────────────────────────
# errors.py — Application Exceptions
#
# Three things can go wrong in this service:
#   1. The remote database can't be reached or refuses our token
#   2. A JSON file on disk can't be written
#   3. A client sends a user record with fields missing
#
# Each gets its own exception type so the routes can map it to
# the right HTTP status without inspecting error messages.
# ─────────────────────────────────────────────────────────────────


class DeviceLogError(Exception):
    """Base class for every error raised by this service."""


class RemoteDatabaseError(DeviceLogError):
    """Sign-in or snapshot fetch against Firebase failed."""


class StorageError(DeviceLogError):
    """A backing JSON file could not be read or written."""


class ValidationError(DeviceLogError):
    """A user record is missing one or more required fields."""

    def __init__(self, message: str = "Missing one or more required fields.", missing=None):
        super().__init__(message)
        self.missing = list(missing or [])
