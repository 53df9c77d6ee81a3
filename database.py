# ─────────────────────────────────────────────────────────────────
# database.py — File-Backed In-Memory Storage
#
# SEPARATION OF CONCERNS:
# This file owns all data storage for the application.
# If we ever swap to PostgreSQL or Redis, we only change THIS file.
#
# Two stores, same policy:
#   - The in-memory list is the source of truth while we run
#   - Every mutation rewrites the WHOLE JSON file (pretty-printed)
#   - On startup the file is loaded back; a missing file becomes "[]"
#     and anything that isn't a JSON array is discarded
#
# Rewriting the full file is fine at this scale (≤ 1000 log records).
# ─────────────────────────────────────────────────────────────────

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from errors import StorageError
from models import LogRecord, User

logger = logging.getLogger("database")

DEFAULT_LOG_CAPACITY = 1000


class JsonArrayFile:
    """A JSON file holding a single array, read and written whole."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Any]:
        """
        Returns the array stored in the file, creating it as [] first
        if it doesn't exist. Non-array JSON yields an empty list.

        Raises StorageError if the file can't be created, read or parsed.
        """

        try:
            if not self.path.exists():
                self.path.write_text("[]", encoding="utf-8")
            raw = self.path.read_text(encoding="utf-8")
            value = json.loads(raw)
        except (OSError, ValueError) as err:
            raise StorageError(f"could not load {self.path}: {err}") from err

        if not isinstance(value, list):
            logger.warning(f"⚠️  {self.path} does not hold a JSON array — starting empty")
            return []

        return value

    def write(self, items: List[Any]):
        """Overwrites the file with `items` as indented JSON."""

        try:
            self.path.write_text(json.dumps(items, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as err:
            raise StorageError(f"could not write {self.path}: {err}") from err


class LogStore:
    """
    Ring buffer of LogRecords, mirrored to a JSON file.

    Holds at most `capacity` records; appending past that drops
    the oldest. A failed file write is logged and ignored — the
    next successful append rewrites the full file anyway.
    """

    def __init__(self, path: Union[str, Path], capacity: int = DEFAULT_LOG_CAPACITY):
        self.file = JsonArrayFile(path)
        self.capacity = capacity
        self._records: List[Dict[str, Any]] = []

    def load(self):
        self._records = self.file.load()
        logger.info(f"📂 Loaded {len(self._records)} log records from {self.file.path}")

    def append(self, record: LogRecord):
        self._records.append(record.to_json())

        if len(self._records) > self.capacity:
            self._records = self._records[-self.capacity:]

        try:
            self.file.write(self._records)
        except StorageError as err:
            logger.error(f"❌ Log write failed, keeping records in memory: {err}")

    def snapshot_all(self) -> List[Dict[str, Any]]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)


class UserRegistry:
    """
    Append-only list of users, mirrored to a JSON file.

    There is no update or delete. If the file write fails the user is
    still kept in memory (the registry never shrinks) and StorageError
    is raised so the caller can report it.
    """

    def __init__(self, path: Union[str, Path]):
        self.file = JsonArrayFile(path)
        self._users: List[Dict[str, Any]] = []

    def load(self):
        self._users = self.file.load()
        logger.info(f"📂 Loaded {len(self._users)} users from {self.file.path}")

    def add(self, payload: Any) -> User:
        # Raises ValidationError before anything is touched
        user = payload if isinstance(payload, User) else User.from_payload(payload)

        self._users.append(user.to_json())
        self.file.write(self._users)

        logger.info(f"👤 User added: '{user.user_id}' ({user.user_name})")
        return user

    def list_all(self) -> List[Dict[str, Any]]:
        return list(self._users)

    def __len__(self) -> int:
        return len(self._users)
